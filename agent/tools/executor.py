"""
Operation executor.

Dispatches an approved FileOperation to the workspace or the command runner.
"""
import logging

from core.exceptions import InvalidOperationError
from core.models import FileOperation, OperationKind
from core.workspace import Workspace

from .code_execution import run_command

logger = logging.getLogger(__name__)


class OperationExecutor:
    """Executes approved operations inside a workspace."""

    def __init__(self, workspace: Workspace, command_timeout: float):
        self.workspace = workspace
        self.command_timeout = command_timeout

    async def execute(self, operation: FileOperation) -> str:
        """
        Execute an operation.

        Args:
            operation: An operation the policy engine allowed

        Returns:
            Result text for the results summary

        Raises:
            CoreError: NotFoundError, AlreadyExistsError, SandboxViolation or
                ExecutionError, depending on the operation
            OSError: If the filesystem call itself fails
        """
        kind = operation.kind
        path = operation.path
        logger.debug("Executing %s", operation.describe())

        if kind == OperationKind.READ:
            return self.workspace.read_file(path)

        if kind == OperationKind.WRITE:
            self.workspace.write_file(path, operation.content or "")
            return "File written successfully"

        if kind == OperationKind.CREATE:
            self.workspace.create_file(path, operation.content or "")
            return "File created successfully"

        if kind == OperationKind.DELETE:
            self.workspace.delete(path)
            return "File deleted successfully"

        if kind == OperationKind.LIST:
            entries = self.workspace.list_dir(path)
            return f"Files found: {', '.join(entries)}"

        if kind == OperationKind.EXECUTE:
            result = await run_command(
                path,
                operation.arguments,
                cwd=self.workspace.root,
                timeout=self.command_timeout,
            )
            return result.render()

        raise InvalidOperationError(f"Operation {operation.operation} not supported")
