"""
Shared pytest fixtures for all tests.
"""
import tempfile
from pathlib import Path
from typing import Iterator

import pytest

from core.audit import AuditLog
from core.models import FileOperation
from core.permissions import (
    PermissionChecker,
    PermissionLevel,
    PolicySettings,
    PolicyState,
    RiskLevel,
    Verdict,
)
from core.workspace import Workspace


class ScriptedConfirmationChannel:
    """Confirmation channel that answers from a fixed script and records requests."""

    def __init__(self, *verdicts: Verdict):
        self.verdicts = list(verdicts)
        self.requests: list[tuple[FileOperation, RiskLevel, str | None]] = []

    async def request(self, operation: FileOperation, risk: RiskLevel, preview: str | None) -> Verdict:
        self.requests.append((operation, risk, preview))
        if not self.verdicts:
            return Verdict.DENY
        return self.verdicts.pop(0)


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def workspace(temp_dir: Path) -> Workspace:
    """Workspace rooted in its own subdirectory of the temp dir."""
    return Workspace(temp_dir / "workspace")


@pytest.fixture
def make_channel():
    """Factory for scripted confirmation channels."""
    return ScriptedConfirmationChannel


@pytest.fixture
def channel() -> ScriptedConfirmationChannel:
    """Confirmation channel with no scripted answers (denies everything)."""
    return ScriptedConfirmationChannel()


@pytest.fixture
def settings() -> PolicySettings:
    return PolicySettings(permission_level=PermissionLevel.SAFE_WRITE)


@pytest.fixture
def state(settings: PolicySettings) -> PolicyState:
    return PolicyState(settings)


@pytest.fixture
def checker(state: PolicyState, workspace: Workspace, channel: ScriptedConfirmationChannel) -> PermissionChecker:
    return PermissionChecker(state, workspace, channel)


@pytest.fixture
def audit_log(workspace: Workspace) -> AuditLog:
    return AuditLog.for_workspace(workspace)

