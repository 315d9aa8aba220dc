"""
Credential refresh recovery strategy.
"""
import logging
from collections.abc import Mapping
from typing import Any

from ..types import (
    CredentialRefresher,
    ErrorDescriptor,
    RecoveryAction,
    RecoveryOutcome,
    RecoveryStrategyName,
)
from .base import BaseRecoveryStrategy

logger = logging.getLogger(__name__)

_installed_refresher: CredentialRefresher | None = None


def set_credential_refresher(refresher: CredentialRefresher | None) -> None:
    """Install the process-wide credential refresher. None uninstalls it."""
    global _installed_refresher
    _installed_refresher = refresher


def get_credential_refresher() -> CredentialRefresher | None:
    return _installed_refresher


class TokenRefreshStrategy(BaseRecoveryStrategy):
    """
    Refreshes credentials through the credential refresher collaborator.

    The refresher may return a bool or a mapping with a ``success`` key.
    Redirecting to re-authentication after a failed refresh is left to the
    caller.
    """

    def __init__(self, refresher: CredentialRefresher | None = None):
        self._refresher = refresher

    @property
    def strategy_name(self) -> RecoveryStrategyName:
        return RecoveryStrategyName.TOKEN_REFRESH

    @property
    def refresher(self) -> CredentialRefresher | None:
        return self._refresher if self._refresher is not None else get_credential_refresher()

    async def recover(
        self,
        descriptor: ErrorDescriptor,
        context: Mapping[str, Any]
    ) -> RecoveryOutcome:
        refresher = self.refresher
        if refresher is None:
            logger.warning("Token refresh requested but no credential refresher is installed")
            return RecoveryOutcome(success=False, action=RecoveryAction.TOKEN_REFRESH_FAILED)

        try:
            result = await refresher()
        except Exception as e:
            logger.error(f"Credential refresh failed: {e}")
            return RecoveryOutcome(success=False, action=RecoveryAction.TOKEN_REFRESH_FAILED)

        if isinstance(result, Mapping):
            succeeded = bool(result.get("success"))
        else:
            succeeded = bool(result)

        if succeeded:
            logger.info("Credentials refreshed")
            return RecoveryOutcome(success=True, action=RecoveryAction.TOKEN_REFRESHED)

        logger.warning("Credential refresher reported failure")
        return RecoveryOutcome(success=False, action=RecoveryAction.TOKEN_REFRESH_FAILED)
