"""
Confirmation channel protocol.

The policy engine asks a ConfirmationChannel whenever an operation needs the
user's approval. The console package provides the interactive implementation.
"""

from typing import Protocol

from core.models import FileOperation

from .models import RiskLevel, Verdict


class ConfirmationChannel(Protocol):
    """Abstract interface for asking the user to approve an operation."""

    async def request(self, operation: FileOperation, risk: RiskLevel, preview: str | None) -> Verdict:
        """Return the user's verdict for the operation."""
        ...


class AutoDenyChannel:
    """Non-interactive channel that denies every confirmation request."""

    async def request(self, operation: FileOperation, risk: RiskLevel, preview: str | None) -> Verdict:
        """Deny the operation."""
        return Verdict.DENY
