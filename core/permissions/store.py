"""Process-wide policy state."""

import logging

from .models import PermissionLevel, PolicySettings

logger = logging.getLogger(__name__)


class PolicyState:
    """
    Holder of the policy settings shared by every orchestration pass.

    Settings are read freely; the only runtime mutation is elevate(),
    triggered by an "approve and elevate" confirmation.
    """

    def __init__(self, settings: PolicySettings | None = None):
        """
        Initialize the policy state.

        Args:
            settings: Settings loaded at startup (defaults if omitted)
        """
        self._settings = settings.model_copy(deep=True) if settings else PolicySettings()

    @property
    def settings(self) -> PolicySettings:
        return self._settings

    @property
    def permission_level(self) -> PermissionLevel:
        return self._settings.permission_level

    def elevate(self) -> None:
        """Raise the permission level to FULL_ACCESS for the rest of the process."""
        if self._settings.permission_level == PermissionLevel.FULL_ACCESS:
            return
        previous = self._settings.permission_level
        self._settings = self._settings.model_copy(
            update={"permission_level": PermissionLevel.FULL_ACCESS}
        )
        logger.info("Permission level elevated: %s -> %s", previous.value, PermissionLevel.FULL_ACCESS.value)
