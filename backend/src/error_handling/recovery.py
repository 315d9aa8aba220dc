"""Recovery engine dispatching to one strategy per recovery hint."""
import logging
from collections.abc import Mapping
from typing import Any

from .config import ErrorHandlerConfig
from .strategies import (
    BaseRecoveryStrategy,
    NetworkRetryStrategy,
    RateLimitBackoffStrategy,
    ServiceFallbackStrategy,
    TokenRefreshStrategy,
)
from .types import (
    CredentialRefresher,
    ErrorDescriptor,
    ErrorHandlerOptions,
    RecoveryOutcome,
    RecoveryStrategyName,
)

logger = logging.getLogger(__name__)


class RecoveryEngine:
    """Holds one strategy per strategy name and executes it."""

    def __init__(
        self,
        config: ErrorHandlerConfig | None = None,
        credential_refresher: CredentialRefresher | None = None
    ):
        self.config = config or ErrorHandlerConfig()
        self._strategies: dict[RecoveryStrategyName, BaseRecoveryStrategy] = {}

        for strategy in (
            TokenRefreshStrategy(credential_refresher),
            RateLimitBackoffStrategy(
                default_delay=self.config.default_retry_after,
                max_delay=self.config.max_retry_after
            ),
            NetworkRetryStrategy(default_max_retries=self.config.default_max_retries),
            ServiceFallbackStrategy(),
        ):
            self.register(strategy)

    def register(self, strategy: BaseRecoveryStrategy) -> None:
        """Register a strategy, replacing any existing one with the same name."""
        self._strategies[strategy.strategy_name] = strategy

    def get_strategy(self, name: RecoveryStrategyName) -> BaseRecoveryStrategy | None:
        return self._strategies.get(name)

    async def recover(
        self,
        descriptor: ErrorDescriptor,
        context: Mapping[str, Any] | None = None,
        options: ErrorHandlerOptions | None = None
    ) -> RecoveryOutcome | None:
        """Execute the strategy suggested by the descriptor's recovery hint.

        Returns None when recovery is disabled, the hint is missing or does
        not allow retries, or no strategy is registered for it.
        """
        options = options or ErrorHandlerOptions()
        hint = descriptor.recovery_hint

        if not options.enable_recovery or hint is None or not hint.retry_enabled:
            return None

        strategy = self._strategies.get(hint.strategy)
        if strategy is None:
            logger.debug(f"No recovery strategy registered for {hint.strategy.value}")
            return None

        logger.info(f"Attempting recovery with {strategy.name}")
        outcome = await strategy.recover(descriptor, context or {})

        if outcome is not None:
            logger.info(
                f"Recovery {strategy.name} finished: success={outcome.success} "
                f"action={outcome.action.value}"
            )
        return outcome
