"""Git subprocess wrapper — repo check, status, add, staged diff, commit, push."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Union

from autocommit.git.models import StatusSnapshot
from autocommit.git.status_parser import parse_status

GIT_TIMEOUT = 120  # seconds; push may wait on the network


class GitError(Exception):
    """Base class for repository / subprocess failures."""


class GitCommandFailed(GitError):
    """Raised when git is unavailable or exits non-zero."""


def _run_git(
    args: List[str],
    cwd: Path,
    *,
    text: bool = True,
    timeout: int = GIT_TIMEOUT,
) -> Union[str, bytes]:
    """Run a git command and return stdout. Raises GitCommandFailed on failure."""
    try:
        if text:
            result = subprocess.run(
                ["git", *args],
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=timeout,
                encoding="utf-8",
                errors="replace",
            )
        else:
            result = subprocess.run(
                ["git", *args],
                cwd=cwd,
                capture_output=True,
                timeout=timeout,
            )
    except FileNotFoundError:
        raise GitCommandFailed("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitCommandFailed(f"git command timed out after {timeout}s: git {args[0]}")

    if result.returncode != 0:
        stderr = result.stderr
        if isinstance(stderr, bytes):
            stderr = stderr.decode("utf-8", errors="replace")
        detail = stderr.strip() or f"exit code {result.returncode}"
        raise GitCommandFailed(f"git {args[0]} failed: {detail}")
    return result.stdout


class GitRepo:
    """The git operations the commit workflow needs, bound to one directory."""

    def __init__(self, cwd: Optional[Path] = None) -> None:
        self.cwd = cwd or Path.cwd()

    def is_repo(self) -> bool:
        """True when ``git rev-parse --git-dir`` exits 0."""
        try:
            _run_git(["rev-parse", "--git-dir"], cwd=self.cwd, timeout=30)
        except GitCommandFailed:
            return False
        return True

    def status(self) -> StatusSnapshot:
        out = _run_git(
            ["status", "--porcelain=v2", "--untracked-files=all"],
            cwd=self.cwd,
        )
        return parse_status(out)

    def add_all(self) -> None:
        _run_git(["add", "-A"], cwd=self.cwd)

    def staged_diff(self) -> bytes:
        """Raw bytes of ``git diff --cached``."""
        return _run_git(["diff", "--cached"], cwd=self.cwd, text=False)

    def commit(self, message: str) -> None:
        _run_git(["commit", "-m", message], cwd=self.cwd)

    def push(self) -> None:
        """Push the current branch to its configured upstream."""
        _run_git(["push"], cwd=self.cwd)
