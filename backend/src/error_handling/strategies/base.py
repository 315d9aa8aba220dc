"""
Base class for recovery strategies.
"""
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from ..types import ErrorDescriptor, RecoveryOutcome, RecoveryStrategyName


class BaseRecoveryStrategy(ABC):
    """Base class for recovery strategies."""

    @property
    @abstractmethod
    def strategy_name(self) -> RecoveryStrategyName:
        """Strategy this implementation handles."""
        pass

    @abstractmethod
    async def recover(
        self,
        descriptor: ErrorDescriptor,
        context: Mapping[str, Any]
    ) -> RecoveryOutcome | None:
        """
        Execute the strategy for a failure.

        Args:
            descriptor: The normalized failure
            context: Caller-supplied context (retry counters, service name)

        Returns:
            The outcome, or None when the strategy does not apply
        """
        pass

    @property
    def name(self) -> str:
        """Strategy name for logging."""
        return self.strategy_name.value
