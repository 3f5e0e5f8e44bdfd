"""Tests for the permission system."""

import pytest

from core.exceptions import SandboxViolation
from core.models import FileOperation, OperationKind
from core.permissions import (
    AutoDenyChannel,
    Decision,
    PermissionChecker,
    PermissionLevel,
    PolicySettings,
    PolicyState,
    RiskLevel,
    Verdict,
    classify,
    command_base_name,
    find_blocked_substring,
    is_dangerous_command,
)

ALL_KINDS = list(OperationKind)
ALL_LEVELS = list(PermissionLevel)


def op(operation: str, path: str, content: str | None = None, arguments: list[str] | None = None) -> FileOperation:
    return FileOperation(operation=operation, path=path, content=content, arguments=arguments)


def make_checker(workspace, level=PermissionLevel.SAFE_WRITE, channel=None, **overrides) -> PermissionChecker:
    settings = PolicySettings(permission_level=level, **overrides)
    return PermissionChecker(PolicyState(settings), workspace, channel or AutoDenyChannel())


class TestRiskClassification:
    """Tests for classify()."""

    @pytest.mark.parametrize("target_exists", [True, False])
    @pytest.mark.parametrize("dangerous", [True, False])
    def test_read_and_list_are_safe(self, target_exists, dangerous):
        assert classify(OperationKind.READ, target_exists, dangerous) == RiskLevel.SAFE
        assert classify(OperationKind.LIST, target_exists, dangerous) == RiskLevel.SAFE

    @pytest.mark.parametrize("target_exists", [True, False])
    @pytest.mark.parametrize("dangerous", [True, False])
    def test_delete_is_dangerous(self, target_exists, dangerous):
        assert classify(OperationKind.DELETE, target_exists, dangerous) == RiskLevel.DANGEROUS

    def test_write_depends_on_existence(self):
        assert classify(OperationKind.WRITE, False, False) == RiskLevel.MODERATE
        assert classify(OperationKind.WRITE, True, False) == RiskLevel.DANGEROUS
        assert classify(OperationKind.CREATE, False, False) == RiskLevel.MODERATE
        assert classify(OperationKind.CREATE, True, False) == RiskLevel.DANGEROUS

    def test_execute_depends_on_command(self):
        assert classify(OperationKind.EXECUTE, False, False) == RiskLevel.MODERATE
        assert classify(OperationKind.EXECUTE, False, True) == RiskLevel.DANGEROUS

    def test_risk_ordering(self):
        assert RiskLevel.SAFE < RiskLevel.MODERATE < RiskLevel.DANGEROUS
        assert RiskLevel.DANGEROUS >= RiskLevel.MODERATE
        assert max(RiskLevel.SAFE, RiskLevel.DANGEROUS) == RiskLevel.DANGEROUS


class TestPatternMatching:
    """Tests for block-list and dangerous command matching."""

    def test_blocked_path_is_case_insensitive(self):
        blocked = {"bin/", ".git/"}
        assert find_blocked_substring("src/Bin/app.dll", blocked) == "bin/"
        assert find_blocked_substring(".GIT/config", blocked) == ".git/"
        assert find_blocked_substring("src/main.cs", blocked) is None

    def test_backslashes_are_normalized(self):
        assert find_blocked_substring("obj\\Debug\\x.json", {"obj/"}) == "obj/"

    def test_command_base_name(self):
        assert command_base_name("/usr/bin/RM") == "rm"
        assert command_base_name("C:\\Tools\\format.exe") == "format"

    def test_dangerous_commands(self):
        dangerous = {"rm", "del", "format", "fdisk", "shutdown"}
        assert is_dangerous_command("rm", dangerous)
        assert is_dangerous_command("/bin/rm", dangerous)
        assert is_dangerous_command("SHUTDOWN.EXE", dangerous)
        assert not is_dangerous_command("dotnet", dangerous)
        assert not is_dangerous_command("git", dangerous)


class TestSettings:
    """Tests for PolicySettings normalization."""

    def test_defaults(self):
        settings = PolicySettings()
        assert settings.permission_level == PermissionLevel.SAFE_WRITE
        assert ".cs" in settings.allowed_extensions
        assert "node_modules/" in settings.blocked_path_substrings
        assert settings.confirm_dangerous_commands is False

    def test_extensions_get_leading_dot_and_lower_case(self):
        settings = PolicySettings(allowed_extensions={"PY", ".Txt"})
        assert settings.allowed_extensions == {".py", ".txt"}

    def test_level_from_string(self):
        settings = PolicySettings.model_validate({"permission_level": "read_only"})
        assert settings.permission_level == PermissionLevel.READ_ONLY


class TestDecision:
    """Tests for Decision invariants."""

    def test_confirmation_implies_not_allowed(self):
        with pytest.raises(ValueError):
            Decision(allowed=True, requires_confirmation=True)

    def test_resolve(self):
        pending = Decision.require_confirmation("needs approval")
        assert pending.resolve(True).allowed
        assert "approved by user" in pending.resolve(True).reason
        assert not pending.resolve(False).allowed


class TestStageA:
    """Tests for the block-list stage."""

    @pytest.mark.parametrize("level", ALL_LEVELS)
    def test_blocked_path_denied_at_every_level(self, workspace, level):
        checker = make_checker(workspace, level)
        operation = op("READ_FILE", "bin/Debug/app.txt")
        decision = checker.check(operation, checker.evaluate_risk(operation))
        assert not decision.allowed
        assert not decision.requires_confirmation
        assert "blocked by security policy" in decision.reason

    @pytest.mark.parametrize("level", ALL_LEVELS)
    def test_disallowed_extension_denied(self, workspace, level):
        checker = make_checker(workspace, level)
        operation = op("WRITE_FILE", "script.exe", "x")
        decision = checker.check(operation, checker.evaluate_risk(operation))
        assert not decision.allowed
        assert ".exe" in decision.reason

    def test_file_without_extension_not_extension_checked(self, workspace):
        checker = make_checker(workspace)
        operation = op("CREATE_FILE", "Makefile", "all:")
        decision = checker.check(operation, checker.evaluate_risk(operation))
        assert decision.allowed

    @pytest.mark.parametrize("level", ALL_LEVELS)
    def test_dangerous_command_denied(self, workspace, level):
        checker = make_checker(workspace, level)
        operation = op("RUN_COMMAND", "rm", arguments=["-rf", "."])
        decision = checker.check(operation, checker.evaluate_risk(operation))
        assert not decision.allowed
        assert not decision.requires_confirmation

    def test_dangerous_command_confirmable_when_configured(self, workspace):
        checker = make_checker(workspace, confirm_dangerous_commands=True)
        operation = op("RUN_COMMAND", "rm", arguments=["old.txt"])
        risk = checker.evaluate_risk(operation)
        assert risk == RiskLevel.DANGEROUS
        assert checker.check(operation, risk).requires_confirmation

    @pytest.mark.parametrize("level", ALL_LEVELS)
    @pytest.mark.parametrize(
        "operation",
        [
            op("READ_FILE", "node_modules/x.json"),
            op("WRITE_FILE", "obj/out.json", "{}"),
            op("DELETE_FILE", ".git/HEAD"),
            op("CREATE_FILE", "a.dll", "x"),
            op("RUN_COMMAND", "format"),
        ],
    )
    def test_allowed_implies_block_list_passed(self, workspace, level, operation):
        checker = make_checker(workspace, level)
        decision = checker.check(operation, checker.evaluate_risk(operation))
        assert checker.check_blocked(operation) is not None
        assert not decision.allowed

    @pytest.mark.parametrize("level", ALL_LEVELS)
    @pytest.mark.parametrize("operation", ["WRITE_FILE", "CREATE_FILE", "DELETE_FILE"])
    def test_protected_path_denied(self, workspace, level, operation):
        workspace.protect("audit.log")
        checker = make_checker(workspace, level, allowed_extensions=[".txt", ".log"])
        for path in ("audit.log", "."):
            blocked = op(operation, path, "x")
            decision = checker.check(blocked, checker.evaluate_risk(blocked))
            assert not decision.allowed
            assert not decision.requires_confirmation
            assert "protected path" in decision.reason

    def test_protected_path_readable(self, workspace):
        workspace.protect("audit.log")
        checker = make_checker(workspace, PermissionLevel.READ_ONLY)
        assert checker.check_blocked(op("READ_FILE", "audit.log")) is None


class TestStageB:
    """Tests for the permission table."""

    @pytest.mark.parametrize(
        "level,risk,allowed,confirm",
        [
            (PermissionLevel.READ_ONLY, RiskLevel.SAFE, True, False),
            (PermissionLevel.READ_ONLY, RiskLevel.MODERATE, False, False),
            (PermissionLevel.READ_ONLY, RiskLevel.DANGEROUS, False, False),
            (PermissionLevel.SAFE_WRITE, RiskLevel.SAFE, True, False),
            (PermissionLevel.SAFE_WRITE, RiskLevel.MODERATE, True, False),
            (PermissionLevel.SAFE_WRITE, RiskLevel.DANGEROUS, False, True),
            (PermissionLevel.FULL_ACCESS, RiskLevel.SAFE, True, False),
            (PermissionLevel.FULL_ACCESS, RiskLevel.MODERATE, True, False),
            (PermissionLevel.FULL_ACCESS, RiskLevel.DANGEROUS, True, False),
        ],
    )
    def test_table(self, workspace, level, risk, allowed, confirm):
        checker = make_checker(workspace, level)
        decision = checker.check(op("WRITE_FILE", "notes.txt", "x"), risk)
        assert decision.allowed is allowed
        assert decision.requires_confirmation is confirm

    def test_read_only_denies_write(self, workspace):
        checker = make_checker(workspace, PermissionLevel.READ_ONLY)
        operation = op("WRITE_FILE", "x.txt", "data")
        decision = checker.check(operation, checker.evaluate_risk(operation))
        assert not decision.allowed

    def test_existing_file_write_needs_confirmation(self, workspace):
        workspace.write_file("old.cs", "class Old { }")
        checker = make_checker(workspace)
        operation = op("WRITE_FILE", "old.cs", "class New { }")
        risk = checker.evaluate_risk(operation)
        assert risk == RiskLevel.DANGEROUS
        assert checker.check(operation, risk).requires_confirmation


class TestEvaluateRisk:
    """Tests for fact gathering."""

    def test_escaping_path_raises(self, workspace):
        checker = make_checker(workspace)
        with pytest.raises(SandboxViolation):
            checker.evaluate_risk(op("READ_FILE", "../../etc/passwd"))
        with pytest.raises(SandboxViolation):
            checker.evaluate_risk(op("WRITE_FILE", "../escape.txt", "x"))

    def test_execute_command_not_resolved(self, workspace):
        """Commands are program names, not workspace paths."""
        checker = make_checker(workspace)
        assert checker.evaluate_risk(op("RUN_COMMAND", "/usr/bin/git", arguments=["status"])) == RiskLevel.MODERATE


class TestPreview:
    """Tests for dry-run previews."""

    def test_write_previews(self, workspace):
        checker = make_checker(workspace)
        assert "Create new file a.txt (5 bytes)" == checker.preview(op("WRITE_FILE", "a.txt", "hello"))
        workspace.write_file("a.txt", "hi")
        assert "(2 -> 5 bytes)" in checker.preview(op("WRITE_FILE", "a.txt", "hello"))

    def test_delete_previews(self, workspace):
        checker = make_checker(workspace)
        assert "cannot delete" in checker.preview(op("DELETE_FILE", "missing.txt"))
        workspace.write_file("dir/a.txt", "x")
        assert "Delete directory dir" in checker.preview(op("DELETE_FILE", "dir"))

    def test_execute_preview(self, workspace):
        checker = make_checker(workspace)
        assert checker.preview(op("RUN_COMMAND", "dotnet", arguments=["build"])) == "Run command: dotnet build"


class TestConfirmation:
    """Tests for confirmation and elevation."""

    @pytest.mark.asyncio
    async def test_preview_passed_when_dry_run_enabled(self, workspace, make_channel):
        channel = make_channel(Verdict.APPROVE)
        checker = make_checker(workspace, channel=channel)
        verdict = await checker.request_confirmation(op("DELETE_FILE", "x.txt"), RiskLevel.DANGEROUS)
        assert verdict == Verdict.APPROVE
        _, risk, preview = channel.requests[0]
        assert risk == RiskLevel.DANGEROUS
        assert preview is not None

    @pytest.mark.asyncio
    async def test_no_preview_when_dry_run_disabled(self, workspace, make_channel):
        channel = make_channel(Verdict.DENY)
        checker = make_checker(workspace, channel=channel, dry_run_enabled=False)
        await checker.request_confirmation(op("DELETE_FILE", "x.txt"), RiskLevel.DANGEROUS)
        assert channel.requests[0][2] is None

    @pytest.mark.asyncio
    async def test_approve_and_elevate(self, workspace, make_channel):
        channel = make_channel(Verdict.APPROVE_AND_ELEVATE)
        checker = make_checker(workspace, channel=channel)
        await checker.request_confirmation(op("DELETE_FILE", "x.txt"), RiskLevel.DANGEROUS)
        assert checker.state.permission_level == PermissionLevel.FULL_ACCESS

    @pytest.mark.asyncio
    async def test_auto_deny_channel(self, workspace):
        checker = make_checker(workspace)
        verdict = await checker.request_confirmation(op("DELETE_FILE", "x.txt"), RiskLevel.DANGEROUS)
        assert verdict == Verdict.DENY
        assert checker.state.permission_level == PermissionLevel.SAFE_WRITE


class TestPolicyState:
    """Tests for PolicyState."""

    def test_settings_are_copied(self):
        settings = PolicySettings()
        state = PolicyState(settings)
        state.elevate()
        assert settings.permission_level == PermissionLevel.SAFE_WRITE
        assert state.permission_level == PermissionLevel.FULL_ACCESS

    def test_elevate_is_idempotent(self):
        state = PolicyState(PolicySettings(permission_level=PermissionLevel.FULL_ACCESS))
        state.elevate()
        assert state.permission_level == PermissionLevel.FULL_ACCESS
