"""Staged-diff size handling."""

from __future__ import annotations

MAX_DIFF_BYTES = 100 * 1024
TRUNCATION_MARKER = b"\n... (truncated)"


def truncate_diff(diff: bytes, max_bytes: int = MAX_DIFF_BYTES) -> bytes:
    """Cut *diff* to *max_bytes* and append a marker.

    This is a plain byte cut; it may split a hunk or a multi-byte character.
    Diffs within the limit come back as an unmodified copy.
    """
    if len(diff) > max_bytes:
        return diff[:max_bytes] + TRUNCATION_MARKER
    return bytes(diff)


def decode_diff(diff: bytes) -> str:
    """Decode diff bytes for the request payload, replacing invalid UTF-8."""
    return diff.decode("utf-8", errors="replace")
