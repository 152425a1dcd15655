"""Exceptions raised by gta."""

from __future__ import annotations


class GtaError(Exception):
    """Base class for all gta errors."""


class LoadError(GtaError):
    """The unit loader could not produce a unit graph."""


class ImportCycleError(LoadError):
    """The loaded import graph contains a cycle."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__("import cycle in dependency graph: " + " -> ".join(cycle))


class UnknownPackageError(GtaError, KeyError):
    """An import path that is not part of the dependency graph."""

    def __init__(self, pkg_path: str):
        self.pkg_path = pkg_path
        super().__init__(pkg_path)

    def __str__(self) -> str:
        return f"unknown package in dependency graph: {self.pkg_path}"


class NoDifferError(GtaError):
    """Raised when there is no differ set."""

    def __init__(self, message: str = "there is no differ set"):
        super().__init__(message)


class DiffError(GtaError):
    """The change source failed to produce a diff."""


class ChangedFilesError(GtaError):
    """An explicit changed-files list could not be used."""
