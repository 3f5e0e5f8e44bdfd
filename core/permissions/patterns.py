"""Substring and extension matching for the block-list."""

from pathlib import PurePosixPath


def normalize_path(path: str) -> str:
    """Lower-case a path and use forward slashes so block-list entries match."""
    return path.replace("\\", "/").lower()


def find_blocked_substring(path: str, blocked: set[str]) -> str | None:
    """
    Find the first block-list entry contained in a path.

    Matching is a case-insensitive substring test, e.g. "bin/" blocks
    "src/Bin/app.dll" and "bin/Debug".

    Args:
        path: Workspace-relative path from the operation
        blocked: Lower-cased block-list entries

    Returns:
        The matching entry, or None if the path is not blocked
    """
    normalized = normalize_path(path)
    for entry in sorted(blocked):
        if entry in normalized:
            return entry
    return None


def file_extension(path: str) -> str:
    """Lower-cased extension including the dot, or "" when there is none."""
    return PurePosixPath(normalize_path(path)).suffix
