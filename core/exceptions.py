"""
Core domain exceptions.

These exceptions are transport-agnostic. The orchestrator catches them at the
per-operation boundary and turns them into result lines.
"""


class CoreError(Exception):
    """Base exception for all core errors."""

    pass


class NotFoundError(CoreError):
    """Raised when a requested file or directory does not exist."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class AlreadyExistsError(CoreError):
    """Raised when creating a file that is already present."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} already exists: {identifier}")


class SandboxViolation(CoreError):
    """Raised when a path resolves outside the workspace root."""

    def __init__(self, path: str, root: str):
        self.path = path
        self.root = root
        super().__init__(f"Access denied to path outside workspace: {path}")


class ExecutionError(CoreError):
    """Raised when a command cannot be launched or does not finish in time."""

    pass


class InvalidOperationError(CoreError):
    """Raised when an operation cannot be performed in the current state."""

    pass
