"""Unit loaders."""

from __future__ import annotations

from gta.loader.base import UnitLoader
from gta.loader.golist import GoListLoader
from gta.loader.snapshot import SnapshotLoader

__all__ = [
    "UnitLoader",
    "GoListLoader",
    "SnapshotLoader",
]
