"""Tools that carry out approved operations."""

from .code_execution import CommandResult, run_command
from .executor import OperationExecutor

__all__ = [
    # Commands
    "CommandResult",
    "run_command",
    # Dispatch
    "OperationExecutor",
]
