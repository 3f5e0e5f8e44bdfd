"""Outcome model."""

from enum import Enum

from pydantic import BaseModel


class OutcomeStatus(str, Enum):
    SUCCESS = "SUCCESS"
    DENIED_BY_USER = "DENIED_BY_USER"
    BLOCKED_BY_POLICY = "BLOCKED_BY_POLICY"
    FAILED = "FAILED"


class Outcome(BaseModel):
    """Final result of one mediated operation."""

    status: OutcomeStatus
    message: str | None = None

    @classmethod
    def success(cls) -> "Outcome":
        return cls(status=OutcomeStatus.SUCCESS)

    @classmethod
    def denied_by_user(cls) -> "Outcome":
        return cls(status=OutcomeStatus.DENIED_BY_USER)

    @classmethod
    def blocked_by_policy(cls) -> "Outcome":
        return cls(status=OutcomeStatus.BLOCKED_BY_POLICY)

    @classmethod
    def failed(cls, message: str) -> "Outcome":
        return cls(status=OutcomeStatus.FAILED, message=message)

    def __str__(self) -> str:
        if self.status == OutcomeStatus.FAILED:
            return f"FAILED: {self.message}"
        return self.status.value
