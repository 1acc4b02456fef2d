"""Git interface layer — adapter, status parsing, diff handling, models."""

from autocommit.git.adapter import (
    GitCommandFailed,
    GitError,
    GitRepo,
)
from autocommit.git.diff import MAX_DIFF_BYTES, decode_diff, truncate_diff
from autocommit.git.models import FileState, FileStatus, StatusSnapshot
from autocommit.git.status_parser import parse_status

__all__ = [
    "FileState",
    "FileStatus",
    "GitCommandFailed",
    "GitError",
    "GitRepo",
    "MAX_DIFF_BYTES",
    "StatusSnapshot",
    "decode_diff",
    "parse_status",
    "truncate_diff",
]
