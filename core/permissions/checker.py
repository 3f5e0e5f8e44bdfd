"""Permission checker implementation."""

import logging

from core.exceptions import SandboxViolation
from core.models import FileOperation, OperationKind
from core.workspace import Workspace

from .confirmation import ConfirmationChannel
from .dangerous import find_dangerous_substring, is_dangerous_command
from .models import Decision, PermissionLevel, RiskLevel, Verdict
from .patterns import file_extension, find_blocked_substring
from .risk import classify
from .store import PolicyState

logger = logging.getLogger(__name__)


class PermissionChecker:
    """
    Policy engine for file operations.

    Decisions are computed in two stages: the block-list (always enforced)
    and then the permission-level table. Confirmation is a separate step the
    caller runs when a decision requires it.
    """

    def __init__(self, state: PolicyState, workspace: Workspace, channel: ConfirmationChannel):
        """
        Initialize the permission checker.

        Args:
            state: Shared policy state
            workspace: Workspace used to look up target facts and previews
            channel: Channel used to ask the user for confirmation
        """
        self.state = state
        self.workspace = workspace
        self.channel = channel

    def evaluate_risk(self, operation: FileOperation) -> RiskLevel:
        """
        Classify an operation using the current workspace state.

        Raises:
            SandboxViolation: If the operation's path escapes the workspace
        """
        kind = operation.kind
        target_exists = False
        command_is_dangerous = False

        if kind == OperationKind.EXECUTE:
            command_is_dangerous = is_dangerous_command(
                operation.path, self.state.settings.dangerous_command_substrings
            )
        elif kind in (OperationKind.WRITE, OperationKind.CREATE):
            target_exists = self.workspace.file_exists(operation.path)
        else:
            # Containment is checked up front for every path-based operation
            self.workspace.resolve(operation.path)

        return classify(kind, target_exists, command_is_dangerous)

    def check_blocked(self, operation: FileOperation) -> str | None:
        """
        Stage A: block-list check.

        Returns:
            Reason the operation is blocked, or None if it passes
        """
        settings = self.state.settings
        kind = operation.kind
        name = operation.describe()

        entry = find_blocked_substring(operation.path, settings.blocked_path_substrings)
        if entry is not None:
            return f"{name} blocked by security policy (path matches '{entry}')"

        if kind in (OperationKind.WRITE, OperationKind.CREATE, OperationKind.DELETE):
            try:
                protected = self.workspace.is_protected(operation.path)
            except SandboxViolation as e:
                return f"{name} blocked by security policy ({e})"
            if protected:
                return f"{name} blocked by security policy (protected path)"

        if kind in (OperationKind.WRITE, OperationKind.CREATE):
            extension = file_extension(operation.path)
            if extension and extension not in settings.allowed_extensions:
                return f"{name} blocked by security policy (extension '{extension}' is not allowed)"

        if kind == OperationKind.EXECUTE and not settings.confirm_dangerous_commands:
            entry = find_dangerous_substring(operation.path, settings.dangerous_command_substrings)
            if entry is not None:
                return f"{name} blocked by security policy (dangerous command '{entry}')"

        return None

    def check(self, operation: FileOperation, risk: RiskLevel) -> Decision:
        """
        Compute the policy decision for an operation.

        Args:
            operation: The operation to check
            risk: Risk level from evaluate_risk()

        Returns:
            Decision (allowed, denied, or requiring confirmation)
        """
        blocked_reason = self.check_blocked(operation)
        if blocked_reason is not None:
            logger.info("Blocked: %s", blocked_reason)
            return Decision.deny(blocked_reason)

        level = self.state.permission_level
        name = operation.describe()

        if level == PermissionLevel.READ_ONLY:
            if risk == RiskLevel.SAFE:
                return Decision.allow("Read-only operation")
            return Decision.deny(f"Permission level {level.value} does not allow {name}")

        if level == PermissionLevel.SAFE_WRITE:
            if risk == RiskLevel.SAFE:
                return Decision.allow("Safe operation")
            if risk == RiskLevel.MODERATE:
                return Decision.allow("Moderate operation allowed")
            return Decision.require_confirmation(f"{name} is {risk.value} and needs user approval")

        if level == PermissionLevel.FULL_ACCESS:
            return Decision.allow("Full access granted")

        return Decision.deny(f"Invalid permission level: {level}")

    def preview(self, operation: FileOperation) -> str:
        """
        Describe what an operation would do, without doing it.

        Used as the dry-run text shown with confirmation requests.
        """
        kind = operation.kind
        path = operation.path
        new_size = len((operation.content or "").encode("utf-8"))

        try:
            if kind == OperationKind.READ:
                if self.workspace.file_exists(path):
                    return f"Read file {path} ({self.workspace.file_size(path)} bytes)"
                return f"File {path} not found"

            if kind in (OperationKind.WRITE, OperationKind.CREATE):
                if self.workspace.file_exists(path):
                    return f"Modify existing file {path} ({self.workspace.file_size(path)} -> {new_size} bytes)"
                return f"Create new file {path} ({new_size} bytes)"

            if kind == OperationKind.DELETE:
                if self.workspace.file_exists(path):
                    return f"Delete file {path} ({self.workspace.file_size(path)} bytes)"
                if self.workspace.directory_exists(path):
                    return f"Delete directory {path} and its contents"
                return f"File {path} not found (cannot delete)"

            if kind == OperationKind.LIST:
                if self.workspace.directory_exists(path):
                    return f"List files in directory {path}"
                return f"Directory {path} not found"

            if kind == OperationKind.EXECUTE:
                return f"Run command: {operation.command_line}"

        except OSError as e:
            return f"Preview unavailable: {e}"

        return f"Unknown operation {operation.operation}"

    async def request_confirmation(self, operation: FileOperation, risk: RiskLevel) -> Verdict:
        """
        Ask the user to approve an operation.

        An APPROVE_AND_ELEVATE answer also raises the permission level to
        FULL_ACCESS for the rest of the process.

        Args:
            operation: The operation awaiting approval
            risk: Its risk level

        Returns:
            The user's verdict
        """
        preview = self.preview(operation) if self.state.settings.dry_run_enabled else None
        verdict = await self.channel.request(operation, risk, preview)
        logger.info("Confirmation for %s: %s", operation.describe(), verdict.value)

        if verdict == Verdict.APPROVE_AND_ELEVATE:
            self.state.elevate()

        return verdict
