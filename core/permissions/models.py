"""Permission system models."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from core.constants import DEFAULT_COMMAND_TIMEOUT


class PermissionLevel(str, Enum):
    """Standing authorization granted to the generator."""

    READ_ONLY = "read_only"
    SAFE_WRITE = "safe_write"
    FULL_ACCESS = "full_access"


class RiskLevel(str, Enum):
    """Potential impact of an operation, ordered by severity."""

    SAFE = "safe"
    MODERATE = "moderate"
    DANGEROUS = "dangerous"

    @property
    def severity(self) -> int:
        return list(RiskLevel).index(self)

    def __lt__(self, other: "RiskLevel") -> bool:
        return self.severity < other.severity

    def __le__(self, other: "RiskLevel") -> bool:
        return self.severity <= other.severity

    def __gt__(self, other: "RiskLevel") -> bool:
        return self.severity > other.severity

    def __ge__(self, other: "RiskLevel") -> bool:
        return self.severity >= other.severity


class Verdict(str, Enum):
    """User answer to a confirmation request."""

    APPROVE = "approve"
    DENY = "deny"
    APPROVE_AND_ELEVATE = "approve-and-elevate"

    @property
    def approved(self) -> bool:
        return self in (Verdict.APPROVE, Verdict.APPROVE_AND_ELEVATE)


class Decision(BaseModel):
    """Policy verdict for a single operation."""

    allowed: bool
    requires_confirmation: bool = False
    reason: str = ""

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _confirmation_implies_not_allowed(self) -> "Decision":
        if self.requires_confirmation and self.allowed:
            raise ValueError("A decision requiring confirmation cannot already be allowed")
        return self

    @classmethod
    def allow(cls, reason: str = "") -> "Decision":
        return cls(allowed=True, reason=reason)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(allowed=False, reason=reason)

    @classmethod
    def require_confirmation(cls, reason: str) -> "Decision":
        return cls(allowed=False, requires_confirmation=True, reason=reason)

    def resolve(self, approved: bool) -> "Decision":
        """Final decision once the user answered a confirmation request."""
        if approved:
            return Decision.allow(f"{self.reason} (approved by user)")
        return Decision.deny(f"{self.reason} (denied by user)")


def _lower_set(values: set[str]) -> set[str]:
    return {v.strip().lower() for v in values if v.strip()}


class PolicySettings(BaseModel):
    """Permission settings loaded at startup."""

    permission_level: PermissionLevel = Field(
        default=PermissionLevel.SAFE_WRITE,
        description="Standing permission level",
    )
    dry_run_enabled: bool = Field(
        default=True,
        description="Show an operation preview when asking for confirmation",
    )
    audit_enabled: bool = Field(
        default=True,
        description="Append every decision and outcome to the audit log",
    )
    allowed_extensions: set[str] = Field(
        default_factory=lambda: {".cs", ".txt", ".json", ".md", ".xml"},
        description="File extensions that write/create operations may target",
    )
    blocked_path_substrings: set[str] = Field(
        default_factory=lambda: {"bin/", "obj/", ".git/", "node_modules/"},
        description="Paths containing any of these are always denied",
    )
    dangerous_command_substrings: set[str] = Field(
        default_factory=lambda: {"rm", "del", "format", "fdisk", "shutdown"},
        description="Command names containing any of these are dangerous",
    )
    confirm_dangerous_commands: bool = Field(
        default=False,
        description="Ask for confirmation on dangerous commands instead of blocking them",
    )
    command_timeout: float = Field(
        default=DEFAULT_COMMAND_TIMEOUT,
        gt=0,
        description="Seconds to wait for an executed command",
    )

    @field_validator("allowed_extensions")
    @classmethod
    def _normalize_extensions(cls, value: set[str]) -> set[str]:
        return {ext if ext.startswith(".") else f".{ext}" for ext in _lower_set(value)}

    @field_validator("blocked_path_substrings", "dangerous_command_substrings")
    @classmethod
    def _normalize_substrings(cls, value: set[str]) -> set[str]:
        return _lower_set(value)
