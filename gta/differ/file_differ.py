"""Differ over an explicit list of changed files."""

from __future__ import annotations

import os
from pathlib import Path

from gta.differ.base import Differ, group_by_directory
from gta.errors import ChangedFilesError
from gta.models import Directory


class FileDiffer(Differ):
    """Reports a fixed list of absolute file paths as changed."""

    def __init__(self, files: list[str]):
        self.files = list(files)

    def diff(self) -> dict[str, Directory]:
        return group_by_directory(self.files)


def read_changed_files(path: Path | str) -> list[str]:
    """Read a newline separated list of absolute file paths."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ChangedFilesError(f"could not read changed file list: {e}") from e

    files: list[str] = []
    for line in text.splitlines():
        # CRLF lists leave a trailing "\r"
        line = line.strip()
        if not line:
            continue
        if not os.path.isabs(line):
            raise ChangedFilesError("all changed files paths must be absolute paths")
        files.append(line)
    return files
