"""gta: find the packages affected by a set of changed files."""

from gta.core import GTA
from gta.errors import (
    ChangedFilesError,
    DiffError,
    GtaError,
    ImportCycleError,
    LoadError,
    NoDifferError,
    UnknownPackageError,
)
from gta.graph import DependencyGraph, DependencyGraphBuilder, build_dependency_graph
from gta.models import Directory, GtaConfig, Package, UnitDescriptor
from gta.result import Packages, unique_package_paths

__all__ = [
    "GTA",
    "ChangedFilesError",
    "DependencyGraph",
    "DependencyGraphBuilder",
    "DiffError",
    "Directory",
    "GtaConfig",
    "GtaError",
    "ImportCycleError",
    "LoadError",
    "NoDifferError",
    "Package",
    "Packages",
    "UnitDescriptor",
    "UnknownPackageError",
    "build_dependency_graph",
    "unique_package_paths",
]
