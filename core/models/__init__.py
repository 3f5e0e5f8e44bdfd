"""
Domain models for the file operation mediator.

These are the core data structures used throughout the application.
"""

from .file_operation import OPERATION_SYNONYMS, FileOperation, OperationKind, resolve_kind
from .outcome import Outcome, OutcomeStatus

__all__ = [
    # Operations
    "FileOperation",
    "OperationKind",
    "OPERATION_SYNONYMS",
    "resolve_kind",
    # Outcomes
    "Outcome",
    "OutcomeStatus",
]
