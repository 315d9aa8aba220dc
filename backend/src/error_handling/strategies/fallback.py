"""
Service fallback recovery strategy.
"""
import logging
from collections.abc import Mapping
from typing import Any

from ..types import ErrorDescriptor, RecoveryAction, RecoveryOutcome, RecoveryStrategyName
from .base import BaseRecoveryStrategy

logger = logging.getLogger(__name__)


class ServiceFallbackStrategy(BaseRecoveryStrategy):
    """Signals the caller to degrade to cached or reduced functionality."""

    @property
    def strategy_name(self) -> RecoveryStrategyName:
        return RecoveryStrategyName.SERVICE_FALLBACK

    async def recover(
        self,
        descriptor: ErrorDescriptor,
        context: Mapping[str, Any]
    ) -> RecoveryOutcome:
        service = context.get("service") or (descriptor.details or {}).get("service")
        logger.info(f"Switching to fallback mode{f' for {service}' if service else ''}")
        return RecoveryOutcome(success=True, action=RecoveryAction.FALLBACK_MODE)
