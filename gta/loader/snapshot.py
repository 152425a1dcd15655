"""Unit loader reading a pre-computed JSON snapshot of the unit graph."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ValidationError

from gta.errors import LoadError
from gta.loader.base import UnitLoader
from gta.models import UnitDescriptor

logger = logging.getLogger(__name__)


class SnapshotUnit(BaseModel):
    id: str
    pkg_path: str
    go_files: list[str] = []
    compiled_go_files: list[str] = []
    ignored_files: list[str] = []
    other_files: list[str] = []
    imports: list[str] = []
    errors: list[str] = []


class Snapshot(BaseModel):
    packages: list[SnapshotUnit] = []


class SnapshotLoader(UnitLoader):
    """Load units from a JSON document.

    Build tags were already applied by whatever produced the snapshot and are
    ignored. Include prefixes select the root units; their imports are always
    followed.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self, include_prefixes: list[str], tags: list[str]) -> list[UnitDescriptor]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise LoadError(f"loading packages: reading {self.path}: {e}") from e
        try:
            snapshot = Snapshot.model_validate_json(text)
        except ValidationError as e:
            raise LoadError(f"loading packages: invalid snapshot {self.path}: {e}") from e

        if tags:
            logger.debug("snapshot %s ignores build tags %s", self.path, tags)
        return link_units(snapshot.packages, include_prefixes)


def link_units(units: list[SnapshotUnit], include_prefixes: list[str]) -> list[UnitDescriptor]:
    by_id: dict[str, UnitDescriptor] = {}
    kept: list[SnapshotUnit] = []
    for unit in units:
        if unit.id in by_id:
            logger.debug("snapshot lists %s more than once, keeping the first", unit.id)
            continue
        kept.append(unit)
        by_id[unit.id] = UnitDescriptor(
            id=unit.id,
            pkg_path=unit.pkg_path,
            go_files=list(unit.go_files),
            compiled_go_files=list(unit.compiled_go_files),
            ignored_files=list(unit.ignored_files),
            other_files=list(unit.other_files),
            errors=list(unit.errors),
        )

    for unit in kept:
        desc = by_id[unit.id]
        for imported_id in unit.imports:
            imported = by_id.get(imported_id)
            if imported is None:
                raise LoadError(f"loading packages: {unit.id} imports unknown package {imported_id}")
            desc.imports.append(imported)

    roots = list(by_id.values())
    if include_prefixes:
        roots = [d for d in roots if d.pkg_path.startswith(tuple(include_prefixes))]
    return roots
