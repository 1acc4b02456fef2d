"""``git status --porcelain=v2`` parser.

Dispatches on the first character of each line:

    1 XY sub mH mI mW hH hI path                ordinary entry
    2 XY sub mH mI mW hH hI Xscore path orig    rename / copy
    ? path                                      untracked
    ! path                                      ignored
    # ...                                       header, skipped

Fields are split on single spaces with no quoting support, so for ``1`` and
``2`` entries only the fixed-index field is taken as the path. Malformed or
short lines are skipped; one bad line never aborts the whole read.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from autocommit.git.models import FileState, FileStatus, StatusSnapshot

_ORDINARY_MIN_FIELDS = 9
_RENAME_MIN_FIELDS = 10
_PATH_INDEX = 8
_SCORE_INDEX = 8
_RENAME_PATH_INDEX = 9
_ORIG_PATH_INDEX = 10


def _status_pair(xy: str) -> Optional[Tuple[FileStatus, FileStatus]]:
    if len(xy) < 2:
        return None
    return FileStatus.from_code(xy[0]), FileStatus.from_code(xy[1])


def _parse_score(token: str) -> Optional[int]:
    """``R95`` / ``C100`` -> 95 / 100."""
    if len(token) < 2 or token[0] not in ("R", "C"):
        return None
    digits = token[1:]
    if not digits.isdigit():
        return None
    return int(digits)


def _parse_ordinary(line: str) -> Optional[Tuple[str, FileState]]:
    fields = line.split(" ")
    if len(fields) < _ORDINARY_MIN_FIELDS:
        return None
    pair = _status_pair(fields[1])
    if pair is None:
        return None
    path = fields[_PATH_INDEX]
    if not path:
        return None
    return path, FileState(staged=pair[0], unstaged=pair[1])


def _parse_rename(line: str) -> Optional[Tuple[str, FileState]]:
    fields = line.split(" ")
    if len(fields) < _RENAME_MIN_FIELDS:
        return None
    pair = _status_pair(fields[1])
    if pair is None:
        return None

    path = fields[_RENAME_PATH_INDEX]
    original: Optional[str] = None
    if len(fields) > _ORIG_PATH_INDEX:
        original = fields[_ORIG_PATH_INDEX]
    elif "\t" in path:
        # git proper separates the two paths with a TAB
        path, original = path.split("\t", 1)
    if not path:
        return None

    return path, FileState(
        staged=pair[0],
        unstaged=pair[1],
        original_path=original or None,
        similarity_score=_parse_score(fields[_SCORE_INDEX]),
    )


def _parse_marker(line: str, status: FileStatus) -> Optional[Tuple[str, FileState]]:
    path = line[1:].lstrip()
    if not path:
        return None
    return path, FileState(staged=status, unstaged=status)


def parse_status(text: str) -> StatusSnapshot:
    """Parse porcelain v2 output into a :class:`StatusSnapshot`."""
    entries: Dict[str, FileState] = {}

    for raw in text.split("\n"):
        line = raw.rstrip("\r")
        if not line:
            continue

        kind = line[0]
        if kind == "1":
            parsed = _parse_ordinary(line)
        elif kind == "2":
            parsed = _parse_rename(line)
        elif kind == "?":
            parsed = _parse_marker(line, FileStatus.UNTRACKED)
        elif kind == "!":
            parsed = _parse_marker(line, FileStatus.IGNORED)
        else:
            # '#' headers, 'u' unmerged records and anything unknown
            continue

        if parsed is not None:
            path, state = parsed
            entries[path] = state

    return StatusSnapshot(entries)
