"""Git utilities for environment context.

Queries the ``git`` executable for the branch and working-tree status of
the hook's working directory.  Every failure mode (git not installed, not a
repository, timeout) degrades to a placeholder value instead of raising.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 5.0
UNKNOWN_BRANCH = "unknown"


@dataclass(frozen=True)
class GitStatus:
    """Snapshot of the working tree around a directory."""

    in_repo: bool
    branch: str = UNKNOWN_BRANCH
    dirty_count: int = 0

    @property
    def has_changes(self) -> bool:
        return self.dirty_count > 0


NOT_A_REPO = GitStatus(in_repo=False)


def _run_git(args: list[str], cwd: str | Path) -> str | None:
    """Run ``git <args>`` in *cwd*.

    Returns:
        Stripped stdout, or None if git is missing, fails, or times out.
    """
    try:
        completed = subprocess.run(
            ["git", *args],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT_SECONDS,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("git %s failed in %s: %s", " ".join(args), cwd, e)
        return None
    if completed.returncode != 0:
        return None
    return completed.stdout.strip()


def is_work_tree(cwd: str | Path) -> bool:
    """Return True if *cwd* is inside a git working tree."""
    return _run_git(["rev-parse", "--git-dir"], cwd) is not None


def current_branch(cwd: str | Path) -> str:
    """Return the current branch name, or ``"unknown"``."""
    return _run_git(["rev-parse", "--abbrev-ref", "HEAD"], cwd) or UNKNOWN_BRANCH


def dirty_file_count(cwd: str | Path) -> int:
    """Count modified-or-untracked paths (``git status --porcelain`` lines)."""
    output = _run_git(["status", "--porcelain"], cwd)
    if not output:
        return 0
    return len(output.splitlines())


def read_git_status(cwd: str | Path) -> GitStatus:
    """Collect branch and dirty-file count for *cwd*.

    Args:
        cwd: Directory to inspect.

    Returns:
        GitStatus; ``NOT_A_REPO`` outside a working tree or without git.
    """
    if not is_work_tree(cwd):
        return NOT_A_REPO
    return GitStatus(
        in_repo=True,
        branch=current_branch(cwd),
        dirty_count=dirty_file_count(cwd),
    )
