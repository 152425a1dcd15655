"""Dependency graph: indexes loaded units and answers dependency, dependent and affected queries."""

from __future__ import annotations

import logging
import os
from collections import deque
from typing import Iterable

import networkx as nx

from gta.errors import ImportCycleError, UnknownPackageError
from gta.loader.base import UnitLoader
from gta.models import Package, UnitDescriptor

logger = logging.getLogger(__name__)

_DEPENDENCIES = "dependencies"
_DEPENDENTS = "dependents"


class DependencyGraph:
    """A set of packages that are related to each other.

    Built once by DependencyGraphBuilder and read-only afterwards, so queries
    may run concurrently without locking.
    """

    def __init__(self) -> None:
        self.by_id: dict[str, Package] = {}  # id -> package
        self.by_path: dict[str, list[Package]] = {}  # import path -> variants
        self.by_file: dict[str, Package] = {}  # file -> owning package
        self.by_dir: dict[str, dict[str, Package]] = {}  # dir -> {id: package}

    def __len__(self) -> int:
        return len(self.by_id)

    def __contains__(self, unit_id: object) -> bool:
        return unit_id in self.by_id

    def packages(self) -> list[Package]:
        return list(self.by_id.values())

    def package(self, unit_id: str) -> Package:
        return self.by_id[unit_id]

    def variants(self, pkg_path: str) -> list[Package]:
        try:
            return list(self.by_path[pkg_path])
        except KeyError:
            raise UnknownPackageError(pkg_path) from None

    def owner(self, file_path: str) -> Package | None:
        return self.by_file.get(os.path.normpath(file_path))

    # ── Queries ───────────────────────────────────────────────

    def dependencies(self, pkg_path: str) -> list[Package]:
        """Direct dependencies of every variant at pkg_path."""
        return list(self._walk(self.variants(pkg_path), _DEPENDENCIES, recursive=False).values())

    def transitive_dependencies(self, pkg_path: str) -> list[Package]:
        """Full transitive dependencies of the package."""
        return list(self._walk(self.variants(pkg_path), _DEPENDENCIES, recursive=True).values())

    def dependents(self, pkg_path: str) -> list[Package]:
        """Direct dependents of every variant at pkg_path."""
        return list(self._walk(self.variants(pkg_path), _DEPENDENTS, recursive=False).values())

    def transitive_dependents(self, pkg_path: str) -> list[Package]:
        """Full transitive dependents of the package."""
        return list(self._walk(self.variants(pkg_path), _DEPENDENTS, recursive=True).values())

    def affected_packages(self, *files: str) -> tuple[list[Package], list[Package]]:
        """Return (direct, transitive) packages affected by the changed files.

        A file owned by a package marks that package. A file no package owns
        falls back to every package with a file in the same directory. Files
        matching neither are outside the graph and are ignored.
        """
        directly_affected: dict[str, Package] = {}
        for f in files:
            f = os.path.normpath(f)
            pkg = self.by_file.get(f)
            if pkg is not None:
                directly_affected[pkg.id] = pkg
                continue
            dir_pkgs = self.by_dir.get(os.path.dirname(f))
            if dir_pkgs:
                logger.debug("%s not in any package, matched by directory to %d package(s)",
                             f, len(dir_pkgs))
                directly_affected.update(dir_pkgs)
            else:
                logger.debug("%s is outside the dependency graph", f)

        direct = list(directly_affected.values())

        # One walk for the whole batch so shared dependents expand once.
        seeds: dict[str, Package] = {}
        for pkg in direct:
            for variant in self.by_path[pkg.pkg_path]:
                seeds[variant.id] = variant
        all_affected = dict(directly_affected)
        all_affected.update(self._walk(seeds.values(), _DEPENDENTS, recursive=True))

        logger.info("%d file(s) changed: %d package(s) directly affected, %d in total",
                    len(files), len(direct), len(all_affected))
        return direct, list(all_affected.values())

    # ── Internals ─────────────────────────────────────────────

    def _edges(self, pkg: Package, direction: str) -> dict[str, Package]:
        return pkg.dependencies if direction == _DEPENDENCIES else pkg.dependents

    def _walk(self, start: Iterable[Package], direction: str, recursive: bool) -> dict[str, Package]:
        """BFS over edges in one direction, expanding each import path once.

        A reached package pulls in the edges of every variant sharing its
        import path, so variants are always treated as one logical unit.
        """
        start = list(start)
        found: dict[str, Package] = {}
        expanded = {pkg.pkg_path for pkg in start}
        queue = deque(start)

        while queue:
            current = queue.popleft()
            for neighbor_id, neighbor in self._edges(current, direction).items():
                found[neighbor_id] = neighbor
                if not recursive or neighbor.pkg_path in expanded:
                    continue
                expanded.add(neighbor.pkg_path)
                queue.extend(self.by_path[neighbor.pkg_path])

        return found


class DependencyGraphBuilder:
    """Build a dependency graph from the units reported by a loader."""

    def __init__(self, loader: UnitLoader | None = None):
        if loader is None:
            from gta.loader import GoListLoader
            loader = GoListLoader()
        self.loader = loader

    def build(self, include_prefixes: list[str] | None = None,
              tags: list[str] | None = None) -> DependencyGraph:
        descriptors = self.loader.load(list(include_prefixes or []), list(tags or []))
        return self.build_from_descriptors(descriptors)

    def build_from_descriptors(self, descriptors: Iterable[UnitDescriptor]) -> DependencyGraph:
        graph = DependencyGraph()
        expanded: set[str] = set()

        stack = list(descriptors)
        stack.reverse()
        while stack:
            desc = stack.pop()
            if desc.id in expanded:
                continue
            expanded.add(desc.id)

            pkg = self._add_package(graph, desc)
            for imported in desc.imports:
                dependency = self._add_package(graph, imported)
                self._add_edge(pkg, dependency)
                if imported.id not in expanded:
                    stack.append(imported)

        self._check_cycles(graph)
        logger.info("dependency graph: %d package(s), %d import path(s), %d file(s)",
                    len(graph.by_id), len(graph.by_path), len(graph.by_file))
        return graph

    def detect_cycle(self, graph: DependencyGraph) -> list[str]:
        """Return one import cycle as a list of IDs, or [] when the graph is acyclic."""
        digraph = nx.DiGraph()
        digraph.add_nodes_from(graph.by_id)
        for pkg in graph.by_id.values():
            digraph.add_edges_from((pkg.id, dep_id) for dep_id in pkg.dependencies)
        try:
            edges = nx.find_cycle(digraph)
        except nx.NetworkXNoCycle:
            return []
        return [source for source, _ in edges] + [edges[0][0]]

    def _check_cycles(self, graph: DependencyGraph) -> None:
        cycle = self.detect_cycle(graph)
        if cycle:
            raise ImportCycleError(cycle)

    def _add_package(self, graph: DependencyGraph, desc: UnitDescriptor) -> Package:
        existing = graph.by_id.get(desc.id)
        if existing is not None:
            return existing

        for message in desc.errors:
            logger.warning("package %s: %s", desc.id, message)

        files = [os.path.normpath(f) for f in desc.all_files()]
        pkg = Package(id=desc.id, pkg_path=desc.pkg_path, files=files)
        graph.by_id[pkg.id] = pkg
        graph.by_path.setdefault(pkg.pkg_path, []).append(pkg)

        for f in files:
            self._add_file(graph, f, pkg)
            graph.by_dir.setdefault(os.path.dirname(f), {})[pkg.id] = pkg

        logger.debug("added package %s (%d file(s))", pkg.id, len(files))
        return pkg

    @staticmethod
    def _add_file(graph: DependencyGraph, file_path: str, pkg: Package) -> None:
        # Non-test variants win over test variants; otherwise first one wins.
        current = graph.by_file.get(file_path)
        if current is None or (current.is_test_variant and not pkg.is_test_variant):
            graph.by_file[file_path] = pkg

    @staticmethod
    def _add_edge(importer: Package, imported: Package) -> None:
        importer.dependencies[imported.id] = imported
        imported.dependents[importer.id] = importer


def build_dependency_graph(
    include_prefixes: list[str] | None = None,
    tags: list[str] | None = None,
    loader: UnitLoader | None = None,
) -> DependencyGraph:
    """Load units and construct a dependency graph."""
    return DependencyGraphBuilder(loader).build(include_prefixes, tags)
