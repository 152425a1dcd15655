"""Abstract base change source."""

from __future__ import annotations

import abc
import os

from gta.models import Directory


class Differ(abc.ABC):
    """Reports which directories and files differ from a baseline."""

    @abc.abstractmethod
    def diff(self) -> dict[str, Directory]:
        """Return changed directories keyed by absolute path."""

    def diff_files(self) -> list[str]:
        """Return the absolute paths of all changed files."""
        return [
            os.path.join(path, name)
            for path, directory in self.diff().items()
            for name in directory.files
        ]


def group_by_directory(paths: list[str]) -> dict[str, Directory]:
    """Group file paths into Directory entries keyed by their parent directory."""
    dirs: dict[str, Directory] = {}
    for p in paths:
        parent, name = os.path.split(p)
        d = dirs.get(parent)
        if d is None:
            d = Directory(exists=os.path.isdir(parent))
            dirs[parent] = d
        d.files.append(name)
    return dirs
