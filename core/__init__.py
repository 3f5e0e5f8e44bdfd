"""
Core business logic package.

This package contains the transport-agnostic parts of the mediator: the
operation extractor, the permission system, the sandboxed workspace and the
audit log. The agent package sequences them per response and the console
package provides the interactive bindings.
"""

from .audit import AuditLog, AuditRecord
from .exceptions import (
    AlreadyExistsError,
    CoreError,
    ExecutionError,
    InvalidOperationError,
    NotFoundError,
    SandboxViolation,
)
from .extraction import (
    ParsedBlock,
    ParseFailure,
    Span,
    append_results,
    extract_operations,
    find_blocks,
    strip_blocks,
)
from .models import FileOperation, OperationKind, Outcome, OutcomeStatus, resolve_kind
from .workspace import Workspace

__all__ = [
    # Exceptions
    "CoreError",
    "NotFoundError",
    "AlreadyExistsError",
    "SandboxViolation",
    "ExecutionError",
    "InvalidOperationError",
    # Models
    "FileOperation",
    "OperationKind",
    "Outcome",
    "OutcomeStatus",
    "resolve_kind",
    # Extraction
    "Span",
    "ParsedBlock",
    "ParseFailure",
    "find_blocks",
    "extract_operations",
    "strip_blocks",
    "append_results",
    # Storage
    "Workspace",
    "AuditLog",
    "AuditRecord",
]
