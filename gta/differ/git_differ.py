"""Differ backed by git."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from gta.differ.base import Differ, group_by_directory
from gta.errors import DiffError
from gta.models import Directory

logger = logging.getLogger(__name__)


class GitDiffer(Differ):
    """Diffs the working tree against a base branch, or the latest merge commit against its first parent."""

    def __init__(
        self,
        base_branch: str = "origin/master",
        use_merge_commit: bool = False,
        cwd: Path | str | None = None,
    ):
        self.base_branch = base_branch
        self.use_merge_commit = use_merge_commit
        self.cwd = cwd
        self._diff: dict[str, Directory] | None = None

    def diff(self) -> dict[str, Directory]:
        if self._diff is None:
            self._diff = self._compute()
        return self._diff

    def _compute(self) -> dict[str, Directory]:
        root = self._git("rev-parse", "--show-toplevel").strip()

        if self.use_merge_commit:
            commit = self._git("log", "-1", "--merges", "--pretty=format:%H").strip()
            if not commit:
                raise DiffError("no merge commit found")
            logger.info("diffing merge commit %s against its first parent", commit)
            out = self._git("diff", "-z", "--name-only", "--no-renames", f"{commit}^1", commit)
        else:
            base = self._git("merge-base", self.base_branch, "HEAD").strip()
            logger.info("diffing working tree against %s (merge base %s)", self.base_branch, base)
            out = self._git("diff", "-z", "--name-only", "--no-renames", base)

        # -z keeps names unquoted; non-ASCII names are otherwise C-quoted
        paths = [os.path.join(root, name) for name in out.split("\0") if name]
        logger.debug("git reports %d changed file(s)", len(paths))
        return group_by_directory(paths)

    def _git(self, *args: str) -> str:
        cmd = ["git", *args]
        try:
            return subprocess.check_output(cmd, cwd=self.cwd, encoding="utf-8", stderr=subprocess.PIPE)
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
            raise DiffError(f"{' '.join(cmd)}: {detail}") from e
        except OSError as e:
            raise DiffError(f"running git: {e}") from e
