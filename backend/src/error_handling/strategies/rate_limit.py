"""
Rate limit backoff recovery strategy.
"""
import asyncio
import logging
import math
from collections.abc import Mapping
from typing import Any

from ..types import ErrorDescriptor, RecoveryAction, RecoveryOutcome, RecoveryStrategyName
from .base import BaseRecoveryStrategy

logger = logging.getLogger(__name__)


class RateLimitBackoffStrategy(BaseRecoveryStrategy):
    """
    Waits for the server-provided ``retry_after`` before allowing a retry.

    The wait is a real suspension of the calling task. Missing, non-numeric,
    non-positive and non-finite (NaN, infinity) values fall back to
    ``default_delay``; values above ``max_delay`` are capped.
    """

    def __init__(self, default_delay: float = 1.0, max_delay: float = 60.0):
        self.default_delay = default_delay
        self.max_delay = max_delay

    @property
    def strategy_name(self) -> RecoveryStrategyName:
        return RecoveryStrategyName.RATE_LIMIT_BACKOFF

    def calculate_delay(self, descriptor: ErrorDescriptor) -> float:
        """Seconds to wait for this failure."""
        raw = descriptor.details.get("retry_after") if descriptor.details else None

        try:
            delay = float(raw) if raw is not None and not isinstance(raw, bool) else 0.0
        except (TypeError, ValueError):
            delay = 0.0

        if not math.isfinite(delay) or delay <= 0:
            delay = self.default_delay

        return min(delay, self.max_delay)

    async def recover(
        self,
        descriptor: ErrorDescriptor,
        context: Mapping[str, Any]
    ) -> RecoveryOutcome:
        delay = self.calculate_delay(descriptor)
        logger.info(f"Rate limited, waiting {delay}s before retry")
        await asyncio.sleep(delay)
        return RecoveryOutcome(success=True, action=RecoveryAction.RETRY_AFTER_DELAY, delay=delay)
