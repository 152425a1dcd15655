"""Change sources."""

from __future__ import annotations

from gta.differ.base import Differ, group_by_directory
from gta.differ.file_differ import FileDiffer, read_changed_files
from gta.differ.git_differ import GitDiffer

__all__ = [
    "Differ",
    "FileDiffer",
    "GitDiffer",
    "group_by_directory",
    "read_changed_files",
]
