"""
Permission system for mediated file operations.

Provides risk classification, a two-stage policy engine (block-list, then
permission level), and the confirmation protocol for dangerous operations.
"""

from .checker import PermissionChecker
from .confirmation import AutoDenyChannel, ConfirmationChannel
from .dangerous import command_base_name, find_dangerous_substring, is_dangerous_command
from .models import (
    Decision,
    PermissionLevel,
    PolicySettings,
    RiskLevel,
    Verdict,
)
from .patterns import file_extension, find_blocked_substring
from .risk import classify, describe_risk
from .store import PolicyState

__all__ = [
    # Levels
    "PermissionLevel",
    "RiskLevel",
    "Verdict",
    # Models
    "Decision",
    "PolicySettings",
    # Functions
    "classify",
    "describe_risk",
    "command_base_name",
    "find_dangerous_substring",
    "is_dangerous_command",
    "file_extension",
    "find_blocked_substring",
    # Classes
    "PermissionChecker",
    "PolicyState",
    "ConfirmationChannel",
    "AutoDenyChannel",
]
