"""Data models for the affected-package engine."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from gta.differ.base import Differ
    from gta.loader.base import UnitLoader

# "foo [foo.test]" -> variant qualifier of a unit compiled for a test binary
_VARIANT_RE = re.compile(r"\s+\[[^\]]*\]$")

TEST_SUFFIXES = ("_test", ".test")


def strip_variant(unit_id: str) -> str:
    """Return the import path encoded in a unit ID."""
    return _VARIANT_RE.sub("", unit_id)


@dataclass(eq=False)
class Package:
    """A compilation unit and a node in the dependency graph."""
    id: str
    pkg_path: str
    files: list[str] = field(default_factory=list)
    dependencies: dict[str, Package] = field(default_factory=dict, repr=False)
    dependents: dict[str, Package] = field(default_factory=dict, repr=False)

    @classmethod
    def stub(cls, pkg_path: str) -> Package:
        """Path-only stand-in used when decoding serialized results."""
        return cls(id=pkg_path, pkg_path=pkg_path)

    @property
    def is_test_variant(self) -> bool:
        return self.id != self.pkg_path or self.pkg_path.endswith(TEST_SUFFIXES)


@dataclass
class UnitDescriptor:
    """Raw unit as reported by a loader, before indexing."""
    id: str
    pkg_path: str
    go_files: list[str] = field(default_factory=list)
    compiled_go_files: list[str] = field(default_factory=list)
    ignored_files: list[str] = field(default_factory=list)
    other_files: list[str] = field(default_factory=list)
    imports: list[UnitDescriptor] = field(default_factory=list, repr=False)
    errors: list[str] = field(default_factory=list)

    def all_files(self) -> Iterator[str]:
        for files in (self.go_files, self.compiled_go_files,
                      self.ignored_files, self.other_files):
            yield from files


@dataclass
class Directory:
    """A changed directory reported by a differ."""
    exists: bool
    files: list[str] = field(default_factory=list)


def _default_differ() -> Differ:
    from gta.differ import GitDiffer
    return GitDiffer()


def _default_loader() -> UnitLoader:
    from gta.loader import GoListLoader
    return GoListLoader()


@dataclass
class GtaConfig:
    """Configuration for a GTA run."""
    prefixes: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    differ: Differ | None = field(default_factory=_default_differ)
    loader: UnitLoader = field(default_factory=_default_loader)
