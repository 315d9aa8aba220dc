"""
Network retry recovery strategy.
"""
import logging
from collections.abc import Mapping
from typing import Any

from ..types import ErrorDescriptor, RecoveryAction, RecoveryOutcome, RecoveryStrategyName
from .base import BaseRecoveryStrategy

logger = logging.getLogger(__name__)


class NetworkRetryStrategy(BaseRecoveryStrategy):
    """
    Counts retries against a cap using the caller's context.

    Reads ``retry_count`` and ``max_retries`` from the context. No delay is
    applied here; backoff timing belongs to the caller.
    """

    def __init__(self, default_max_retries: int = 3):
        self.default_max_retries = default_max_retries

    @property
    def strategy_name(self) -> RecoveryStrategyName:
        return RecoveryStrategyName.NETWORK_RETRY

    async def recover(
        self,
        descriptor: ErrorDescriptor,
        context: Mapping[str, Any]
    ) -> RecoveryOutcome:
        retry_count = _int_or(context.get("retry_count"), 0)
        max_retries = _int_or(context.get("max_retries"), self.default_max_retries)

        if retry_count < max_retries:
            logger.info(f"Network retry {retry_count + 1}/{max_retries}")
            return RecoveryOutcome(
                success=True,
                action=RecoveryAction.RETRY,
                attempt=retry_count + 1
            )

        logger.warning(f"Network retry limit reached ({max_retries})")
        return RecoveryOutcome(success=False, action=RecoveryAction.MAX_RETRIES_EXCEEDED)


def _int_or(value: Any, default: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return default
