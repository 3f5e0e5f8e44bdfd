"""
Append-only audit log.

Every mediated operation is recorded as a multi-line text block in a file
under the workspace root. Audit failures are logged and never propagate.
"""

import logging
import re
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

from .constants import AUDIT_LOG_FILENAME, AUDIT_TIMESTAMP_FORMAT
from .models import FileOperation, Outcome
from .permissions.models import Decision, PermissionLevel, RiskLevel
from .workspace import Workspace

logger = logging.getLogger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


def escape_field(value: str) -> str:
    """Escape control characters so a field can never span more than one line."""
    return _CONTROL_CHARS.sub(
        lambda m: _CONTROL_ESCAPES.get(m.group(0), f"\\x{ord(m.group(0)):02x}"), value
    )


class AuditRecord(BaseModel):
    """One audited operation."""

    timestamp: datetime = Field(default_factory=datetime.now)
    operation: FileOperation
    decision: Decision
    outcome: Outcome
    risk_level: RiskLevel
    permission_level: PermissionLevel

    model_config = {"frozen": True}

    def render(self) -> str:
        """Format the record as an audit log block, blank line included."""
        permission = "ALLOWED" if self.decision.allowed else "DENIED"
        lines = [
            f"[{self.timestamp.strftime(AUDIT_TIMESTAMP_FORMAT)}] {escape_field(self.operation.describe())}",
            f"  Permission: {permission} - {escape_field(self.decision.reason)}",
            f"  Outcome: {escape_field(str(self.outcome))}",
            f"  Risk Level: {self.risk_level.value}",
            f"  User Permission Level: {self.permission_level.value}",
        ]
        return "\n".join(lines) + "\n\n"


class AuditLog:
    """Append-only recorder of decisions and outcomes."""

    def __init__(self, path: Path, enabled: bool = True):
        """
        Initialize the audit log.

        Args:
            path: Audit file path
            enabled: When False, append() is a no-op
        """
        self.path = path
        self.enabled = enabled

    @classmethod
    def for_workspace(cls, workspace: Workspace, enabled: bool = True) -> "AuditLog":
        """Audit log at the workspace root, protected from mediated operations."""
        audit_log = cls(path=workspace.root / AUDIT_LOG_FILENAME, enabled=enabled)
        workspace.protect(audit_log.path)
        return audit_log

    def append(self, record: AuditRecord) -> None:
        """
        Append one record with a single write.

        Errors are logged and discarded so auditing never affects the
        operation being audited.
        """
        if not self.enabled:
            return
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(record.render())
        except (OSError, ValueError) as e:
            logger.warning("Failed to write audit record to %s: %s", self.path, e)

    def read_entries(self) -> list[str]:
        """Return the recorded blocks, oldest first."""
        if not self.path.exists():
            return []
        text = self.path.read_text(encoding="utf-8")
        return [block.strip("\n") for block in text.split("\n\n") if block.strip()]
