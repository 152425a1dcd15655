"""Result of a change analysis and its JSON form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from pydantic import BaseModel

from gta.models import Package


class PackagesJSON(BaseModel):
    dependencies: dict[str, list[str]] = {}
    changes: list[str] = []
    all_changes: list[str] = []


@dataclass
class Packages:
    """Changed packages and everything that depends on them.

    As an example: package "foo" is imported by packages "bar" and "qux". If
    "foo" has changed, it has two dependent packages, "bar" and "qux":

        dependencies = {"foo": ["bar", "qux"]}
        changes      = ["foo"]
        all_changes  = ["bar", "foo", "qux"]

    Two changed packages may share dependents. If "bar" also imports "foo2"
    and both changed, "bar" appears under both keys but once in all_changes.

    Packages decoded from JSON are path-only stubs with no files or edges.
    """
    dependencies: dict[str, list[Package]] = field(default_factory=dict)
    changes: list[Package] = field(default_factory=list)
    all_changes: list[Package] = field(default_factory=list)

    def to_model(self) -> PackagesJSON:
        return PackagesJSON(
            dependencies=mapify(self.dependencies),
            changes=unique_package_paths(self.changes),
            all_changes=unique_package_paths(self.all_changes),
        )

    def to_dict(self) -> dict:
        return self.to_model().model_dump(exclude_defaults=True)

    def to_json(self, indent: int | None = None) -> str:
        return self.to_model().model_dump_json(exclude_defaults=True, indent=indent)

    @classmethod
    def from_json(cls, data: str | bytes) -> Packages:
        s = PackagesJSON.model_validate_json(data)
        return cls(
            dependencies={k: [Package.stub(p) for p in v] for k, v in s.dependencies.items()},
            changes=[Package.stub(p) for p in s.changes],
            all_changes=[Package.stub(p) for p in s.all_changes],
        )


def normalize_package_path(pkg_path: str) -> str:
    """Fold _test packages and .test binaries into the package they test."""
    if pkg_path.endswith("_test"):
        return pkg_path[:-len("_test")]
    if pkg_path.endswith(".test"):
        return pkg_path[:-len(".test")]
    return pkg_path


def unique_package_paths(pkgs: Iterable[Package]) -> list[str]:
    """Return the sorted set of unique package paths for a set of packages."""
    return sorted({normalize_package_path(pkg.pkg_path) for pkg in pkgs})


def mapify(pkgs: dict[str, list[Package]]) -> dict[str, list[str]]:
    merged: dict[str, set[str]] = {}
    for key, values in pkgs.items():
        merged.setdefault(normalize_package_path(key), set()).update(unique_package_paths(values))
    return {key: sorted(merged[key]) for key in sorted(merged)}
