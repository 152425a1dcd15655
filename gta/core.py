"""GTA orchestrator: diff -> dependency graph -> affected packages."""

from __future__ import annotations

import logging

from gta.errors import DiffError, GtaError, NoDifferError
from gta.graph import DependencyGraph, DependencyGraphBuilder
from gta.models import GtaConfig
from gta.result import Packages

logger = logging.getLogger(__name__)


class GTA:
    """Finds dirty packages and the packages that depend on them."""

    def __init__(self, config: GtaConfig | None = None, graph: DependencyGraph | None = None):
        self.config = config or GtaConfig()
        if graph is None:
            graph = DependencyGraphBuilder(self.config.loader).build(
                self.config.prefixes, self.config.tags,
            )
        self.graph = graph

    def changed_packages(self) -> Packages:
        """Map each changed package to its transitive dependents.

        Returns the changes the differ detected, that map, and the set of
        all affected packages including the changes.
        """
        differ = self.config.differ
        if differ is None:
            raise NoDifferError()

        try:
            changed_files = differ.diff_files()
        except GtaError as e:
            raise DiffError(f"determining diff: {e}") from e

        direct, transitive = self.graph.affected_packages(*changed_files)

        result = Packages(changes=direct, all_changes=transitive)
        for pkg in direct:
            result.dependencies[pkg.pkg_path] = self.graph.transitive_dependents(pkg.pkg_path)
        return result
