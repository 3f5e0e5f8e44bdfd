"""FileOperation model and operation kind resolution."""

import logging
from enum import Enum

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class OperationKind(str, Enum):
    """Normalized category of a requested operation."""

    READ = "read"
    WRITE = "write"
    CREATE = "create"
    DELETE = "delete"
    LIST = "list"
    EXECUTE = "execute"


# Operation name synonyms accepted from the generator (lower-cased)
OPERATION_SYNONYMS: dict[str, OperationKind] = {
    "read": OperationKind.READ,
    "read_file": OperationKind.READ,
    "write": OperationKind.WRITE,
    "write_file": OperationKind.WRITE,
    "create": OperationKind.CREATE,
    "create_file": OperationKind.CREATE,
    "delete": OperationKind.DELETE,
    "delete_file": OperationKind.DELETE,
    "list": OperationKind.LIST,
    "list_files": OperationKind.LIST,
    "execute": OperationKind.EXECUTE,
    "run_command": OperationKind.EXECUTE,
}


def resolve_kind(name: str) -> OperationKind:
    """
    Map a free-form operation name to its kind.

    Unknown names fall back to READ.

    Args:
        name: Operation name as written by the generator (any case)

    Returns:
        The resolved OperationKind
    """
    kind = OPERATION_SYNONYMS.get(name.strip().lower())
    if kind is None:
        logger.warning("Unknown operation name %r, treating as read", name)
        return OperationKind.READ
    return kind


class FileOperation(BaseModel):
    """A file operation request decoded from an operation block."""

    operation: str
    path: str
    content: str | None = None
    arguments: list[str] | None = None

    @property
    def kind(self) -> OperationKind:
        return resolve_kind(self.operation)

    @property
    def command_line(self) -> str:
        """Command and arguments joined for display (execute operations)."""
        return " ".join([self.path, *(self.arguments or [])])

    def describe(self) -> str:
        return f"{self.operation} {self.path}"
