"""Data models for the working-tree status snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple


class FileStatus(str, Enum):
    UNMODIFIED = "unmodified"
    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    TYPE_CHANGED = "type_changed"
    UPDATED_UNMERGED = "updated_unmerged"
    UNTRACKED = "untracked"
    IGNORED = "ignored"

    @classmethod
    def from_code(cls, code: str) -> "FileStatus":
        """Map a porcelain status character. Unknown characters are unmodified."""
        return _CODE_TO_STATUS.get(code, cls.UNMODIFIED)

    @property
    def code(self) -> str:
        return _STATUS_TO_CODE[self]


_CODE_TO_STATUS: Dict[str, FileStatus] = {
    " ": FileStatus.UNMODIFIED,
    ".": FileStatus.UNMODIFIED,
    "M": FileStatus.MODIFIED,
    "A": FileStatus.ADDED,
    "D": FileStatus.DELETED,
    "R": FileStatus.RENAMED,
    "C": FileStatus.COPIED,
    "T": FileStatus.TYPE_CHANGED,
    "U": FileStatus.UPDATED_UNMERGED,
    "?": FileStatus.UNTRACKED,
    "!": FileStatus.IGNORED,
}

_STATUS_TO_CODE: Dict[FileStatus, str] = {
    status: code for code, status in _CODE_TO_STATUS.items() if code != " "
}

_RENAME_OR_COPY = (FileStatus.RENAMED, FileStatus.COPIED)


@dataclass(frozen=True)
class FileState:
    """Index and worktree state of a single path."""

    staged: FileStatus
    unstaged: FileStatus
    original_path: Optional[str] = None  # renames / copies only
    similarity_score: Optional[int] = None  # 0-100, renames / copies only

    def is_untracked(self) -> bool:
        return self.staged == FileStatus.UNTRACKED and self.unstaged == FileStatus.UNTRACKED

    def has_staged_changes(self) -> bool:
        return self.staged not in (FileStatus.UNMODIFIED, FileStatus.UNTRACKED)

    def has_unstaged_changes(self) -> bool:
        return self.unstaged != FileStatus.UNMODIFIED and not self.is_untracked()

    def is_renamed_or_copied(self) -> bool:
        return self.staged in _RENAME_OR_COPY or self.unstaged in _RENAME_OR_COPY


class StatusSnapshot(Mapping[str, FileState]):
    """Read-only view of ``git status`` at one point in time.

    Counts and iterators are computed from the same predicates on every call,
    so ``staged_count()`` always equals ``len(list(iter_staged()))``.
    """

    def __init__(self, entries: Optional[Mapping[str, FileState]] = None) -> None:
        self._entries: Mapping[str, FileState] = MappingProxyType(dict(entries or {}))

    def __getitem__(self, path: str) -> FileState:
        return self._entries[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"StatusSnapshot({dict(self._entries)!r})"

    # ---- queries ----

    def has_changes(self) -> bool:
        return len(self._entries) > 0

    def iter_staged(self) -> Iterator[Tuple[str, FileState]]:
        return ((p, s) for p, s in self._entries.items() if s.has_staged_changes())

    def iter_unstaged(self) -> Iterator[Tuple[str, FileState]]:
        return ((p, s) for p, s in self._entries.items() if s.has_unstaged_changes())

    def iter_untracked(self) -> Iterator[Tuple[str, FileState]]:
        return ((p, s) for p, s in self._entries.items() if s.is_untracked())

    def staged_count(self) -> int:
        return sum(1 for s in self._entries.values() if s.has_staged_changes())

    def unstaged_count(self) -> int:
        return sum(1 for s in self._entries.values() if s.has_unstaged_changes())

    def untracked_count(self) -> int:
        return sum(1 for s in self._entries.values() if s.is_untracked())

    def addable_count(self) -> int:
        """Files that ``git add -A`` would stage."""
        return sum(
            1 for s in self._entries.values()
            if s.has_unstaged_changes() or s.is_untracked()
        )
