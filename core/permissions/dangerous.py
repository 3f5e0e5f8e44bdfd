"""Dangerous command detection."""

from pathlib import PurePosixPath

from .patterns import normalize_path


def command_base_name(command: str) -> str:
    """
    Base name of a command without directory or extension, lower-cased.

    "/usr/bin/RM" -> "rm", "C:\\Tools\\format.exe" -> "format"
    """
    return PurePosixPath(normalize_path(command.strip())).stem


def find_dangerous_substring(command: str, dangerous: set[str]) -> str | None:
    """
    Find the first dangerous-command entry contained in a command's base name.

    Args:
        command: Command to execute, as written in the operation
        dangerous: Lower-cased dangerous-command substrings

    Returns:
        The matching entry, or None if the command is not dangerous
    """
    name = command_base_name(command)
    if not name:
        return None
    for entry in sorted(dangerous):
        if entry in name:
            return entry
    return None


def is_dangerous_command(command: str, dangerous: set[str]) -> bool:
    return find_dangerous_substring(command, dangerous) is not None
