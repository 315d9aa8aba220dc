"""
Top-level error handler.

Every call runs the same pipeline, strictly in order:

1. normalize the failure into an ErrorDescriptor
2. classify it into a category and severity
3. record the fingerprint in the statistics tracker
4. run the suggested recovery strategy (when enabled)
5. push one notification to the sink (unless silenced)

``handle_error`` never raises; problems in recovery or notification are
logged and reported as "no recovery" / "not notified".
"""
import dataclasses
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from .classification import ErrorClassification, ErrorClassifier
from .config import ErrorHandlerConfig
from .normalizer import normalize
from .notifications import Notifier
from .persistence import SQLAlchemyStatisticsPersistence, StatisticsPersistence
from .recovery import RecoveryEngine
from .retry import execute_with_retry
from .statistics import ErrorPatternStats, ErrorStatistics
from .types import (
    UNKNOWN_ERROR_MESSAGE,
    CredentialRefresher,
    ErrorHandlerOptions,
    ErrorHandlingResult,
    ErrorSeverity,
    NotificationSink,
    RecoveryAction,
    RecoveryOutcome,
    T,
)

logger = logging.getLogger(__name__)

OptionsArg = ErrorHandlerOptions | Mapping[str, Any] | None

# Recovery actions after which the original request can be repeated
_RETRY_ACTIONS = frozenset({
    RecoveryAction.TOKEN_REFRESHED,
    RecoveryAction.RETRY_AFTER_DELAY,
    RecoveryAction.RETRY,
})


class ErrorHandler:
    """Normalizes, classifies, recovers from and reports failures."""

    def __init__(
        self,
        config: ErrorHandlerConfig | None = None,
        notification_sink: NotificationSink | None = None,
        credential_refresher: CredentialRefresher | None = None,
        statistics_persistence: StatisticsPersistence | None = None
    ):
        """Initialize the handler.

        Args:
            config: Recovery and retry configuration
            notification_sink: Sink for this handler; defaults to the
                process-wide sink installed with ``set_notification_sink``
            credential_refresher: Refresher for this handler; defaults to the
                process-wide one installed with ``set_credential_refresher``
            statistics_persistence: Backend for saving error statistics

        """
        self.config = config or ErrorHandlerConfig()
        self.classifier = ErrorClassifier()
        self.recovery_engine = RecoveryEngine(self.config, credential_refresher)
        self.statistics = ErrorStatistics()
        self.notifier = Notifier(notification_sink)
        self.statistics_persistence = statistics_persistence

    @classmethod
    def from_config(cls, config: ErrorHandlerConfig, **kwargs: Any) -> 'ErrorHandler':
        """Create a handler, attaching SQL persistence when a database URL is configured."""
        if config.statistics_database_url and "statistics_persistence" not in kwargs:
            kwargs["statistics_persistence"] = SQLAlchemyStatisticsPersistence(
                config.statistics_database_url
            )
        return cls(config=config, **kwargs)

    async def handle_error(
        self,
        error: Any,
        context: Mapping[str, Any] | None = None,
        options: OptionsArg = None
    ) -> ErrorHandlingResult:
        """Handle any raised or rejected value.

        Args:
            error: Exception, raw error body, or any other value
            context: Caller context (``retry_count``, ``max_retries``,
                ``service``, ``endpoint``...)
            options: ErrorHandlerOptions or a mapping of the same keys

        Returns:
            The handling result; ``handled`` is always True

        """
        options = ErrorHandlerOptions.coerce(options)
        context = dict(context or {})

        descriptor = normalize(error)
        classification = self.classifier.classify(descriptor)
        self.statistics.record_error(classification.fingerprint)

        if options.log_error:
            self._log(classification, context, error)

        recovery: RecoveryOutcome | None = None
        try:
            recovery = await self.recovery_engine.recover(descriptor, context, options)
        except Exception as e:
            logger.error(f"Recovery failed for {classification.fingerprint}: {e}")

        user_message = self._user_message(classification, options)

        if options.notify:
            try:
                self.notifier.notify_error(classification, user_message, context.get("service"))
            except Exception as e:
                logger.error(f"Failed to deliver error notification: {e}")

        return ErrorHandlingResult(
            handled=True,
            user_message=user_message,
            should_retry=self._should_retry(classification, recovery),
            recovery=recovery,
            category=classification.category,
            severity=classification.severity,
            descriptor=descriptor,
        )

    async def handle_authentication_error(
        self,
        error: Any,
        context: Mapping[str, Any] | None = None
    ) -> ErrorHandlingResult:
        """Handle an authentication failure, attempting a credential refresh."""
        result = await self.handle_error(error, context, ErrorHandlerOptions(enable_recovery=True))

        if result.recovery is not None and not result.recovery.success:
            logger.warning("Credential refresh failed, re-authentication required")
        return result

    async def handle_service_error(
        self,
        error: Any,
        service_name: str,
        context: Mapping[str, Any] | None = None
    ) -> ErrorHandlingResult:
        """Handle a failure of a named backend service."""
        service_context = {**(context or {}), "service": service_name}
        return await self.handle_error(
            error, service_context, ErrorHandlerOptions(enable_recovery=True)
        )

    async def handle_validation_error(
        self,
        error: Any,
        context: Mapping[str, Any] | None = None
    ) -> ErrorHandlingResult:
        """Handle invalid input. Validation failures are never retried."""
        result = await self.handle_error(error, context, ErrorHandlerOptions(enable_recovery=False))
        return dataclasses.replace(result, should_retry=False)

    async def execute_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        context: Mapping[str, Any] | None = None,
        max_retries: int | None = None
    ) -> T:
        """Run ``operation`` up to ``max_retries`` times; re-raise the last failure."""
        if max_retries is None:
            max_retries = self.config.default_max_retries
        return await execute_with_retry(operation, context, max_retries)

    def get_error_statistics(self) -> dict[str, ErrorPatternStats]:
        """Snapshot of occurrence counts per fingerprint."""
        return self.statistics.snapshot()

    def clear_error_patterns(self) -> None:
        self.statistics.clear()

    async def persist_statistics(self) -> int:
        """Save statistics to the configured backend. Returns entries written."""
        if self.statistics_persistence is None:
            return 0
        return await self.statistics.save_to(self.statistics_persistence)

    async def restore_statistics(self) -> int:
        """Merge statistics from the configured backend. Returns entries read."""
        if self.statistics_persistence is None:
            return 0
        return await self.statistics.load_from(self.statistics_persistence)

    def _user_message(self, classification: ErrorClassification, options: ErrorHandlerOptions) -> str:
        descriptor = classification.descriptor
        hint = descriptor.recovery_hint

        if hint is not None and hint.user_message:
            return hint.user_message
        if descriptor.message and descriptor.message != UNKNOWN_ERROR_MESSAGE:
            return descriptor.message
        return options.fallback_message or UNKNOWN_ERROR_MESSAGE

    def _should_retry(
        self,
        classification: ErrorClassification,
        recovery: RecoveryOutcome | None
    ) -> bool:
        if recovery is not None:
            return recovery.success and recovery.action in _RETRY_ACTIONS

        hint = classification.descriptor.recovery_hint
        if hint is not None:
            return hint.retry_enabled and classification.is_retryable

        return classification.is_retryable

    def _log(self, classification: ErrorClassification, context: dict[str, Any], error: Any) -> None:
        descriptor = classification.descriptor
        message = (
            f"{classification.category.value} error ({classification.severity.value}): "
            f"{descriptor.message} [status={descriptor.status_code}, code={descriptor.code}]"
        )
        if context:
            message += f" context={context}"

        if classification.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL):
            logger.error(message, exc_info=error if isinstance(error, BaseException) else None)
        else:
            logger.warning(message)


# Process-wide handler used by the module-level helpers
error_handler = ErrorHandler()


async def handle_error(
    error: Any,
    context: Mapping[str, Any] | None = None,
    options: OptionsArg = None
) -> ErrorHandlingResult:
    return await error_handler.handle_error(error, context, options)


async def handle_authentication_error(
    error: Any,
    context: Mapping[str, Any] | None = None
) -> ErrorHandlingResult:
    return await error_handler.handle_authentication_error(error, context)


async def handle_service_error(
    error: Any,
    service_name: str,
    context: Mapping[str, Any] | None = None
) -> ErrorHandlingResult:
    return await error_handler.handle_service_error(error, service_name, context)


async def handle_validation_error(
    error: Any,
    context: Mapping[str, Any] | None = None
) -> ErrorHandlingResult:
    return await error_handler.handle_validation_error(error, context)


def get_error_statistics() -> dict[str, ErrorPatternStats]:
    return error_handler.get_error_statistics()


def clear_error_patterns() -> None:
    error_handler.clear_error_patterns()
