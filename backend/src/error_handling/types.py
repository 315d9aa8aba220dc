"""
Shared type definitions for the error handling system.
"""
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Protocol, TypeVar


T = TypeVar('T')

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"


class ErrorCategory(Enum):
    """Categories for classifying errors."""
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    SERVICE_UNAVAILABLE = "service_unavailable"
    SERVER = "server"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> 'ErrorCategory | None':
        """Return the matching category, or None for anything unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RecoveryStrategyName(Enum):
    """Recovery strategies a server may suggest."""
    TOKEN_REFRESH = "token_refresh"
    RATE_LIMIT_BACKOFF = "rate_limit_backoff"
    NETWORK_RETRY = "network_retry"
    SERVICE_FALLBACK = "service_fallback"
    NONE = "none"

    @classmethod
    def parse(cls, value: Any) -> 'RecoveryStrategyName':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.NONE


class RecoveryAction(str, Enum):
    """Outcome vocabulary of recovery strategies."""
    TOKEN_REFRESHED = "token_refreshed"
    TOKEN_REFRESH_FAILED = "token_refresh_failed"
    RETRY_AFTER_DELAY = "retry_after_delay"
    RETRY = "retry"
    MAX_RETRIES_EXCEEDED = "max_retries_exceeded"
    FALLBACK_MODE = "fallback_mode"
    NO_RECOVERY = "no_recovery"


@dataclass(frozen=True)
class RecoveryHint:
    """Server-suggested recovery for a failure."""
    strategy: RecoveryStrategyName
    user_message: str = ""
    actions: tuple[str, ...] = ()
    retry_enabled: bool = False


@dataclass(frozen=True)
class ErrorDescriptor:
    """Canonical, immutable representation of a single failure."""
    message: str
    status_code: int | None = None
    code: str | None = None
    category: ErrorCategory | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    details: Mapping[str, Any] | None = None
    field_errors: Mapping[str, str] | None = None
    recovery_hint: RecoveryHint | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for logging and serialization."""
        return {
            "message": self.message,
            "status_code": self.status_code,
            "code": self.code,
            "category": self.category.value if self.category else None,
            "timestamp": self.timestamp.isoformat(),
            "details": dict(self.details) if self.details else None,
            "field_errors": dict(self.field_errors) if self.field_errors else None,
            "recovery_strategy": (
                self.recovery_hint.strategy.value if self.recovery_hint else None
            ),
        }


@dataclass(frozen=True)
class RecoveryOutcome:
    """Result of executing a recovery strategy."""
    success: bool
    action: RecoveryAction
    attempt: int | None = None
    delay: float | None = None


@dataclass
class ErrorHandlerOptions:
    """Per-call options for the error handler."""
    show_toast: bool = True
    silent: bool = False
    enable_recovery: bool = False
    log_error: bool = True
    fallback_message: str = UNKNOWN_ERROR_MESSAGE

    @property
    def notify(self) -> bool:
        return self.show_toast and not self.silent

    @classmethod
    def coerce(cls, value: 'ErrorHandlerOptions | Mapping[str, Any] | None') -> 'ErrorHandlerOptions':
        """Build options from an instance, a mapping of the same keys, or None."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        known = {name: value[name] for name in cls.__dataclass_fields__ if name in value}
        return cls(**known)


@dataclass(frozen=True)
class ErrorHandlingResult:
    """What the handler did with a failure."""
    handled: bool
    user_message: str
    should_retry: bool
    recovery: RecoveryOutcome | None = None
    category: ErrorCategory = ErrorCategory.UNKNOWN
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    descriptor: ErrorDescriptor | None = None


class NotificationSink(Protocol):
    """Protocol for the toast/alert presenter."""

    def show_error(self, title: str, body: str) -> Any:
        ...

    def show_warning(self, title: str, body: str) -> Any:
        ...

    def show_info(self, title: str, body: str) -> Any:
        ...

    def show_success(self, title: str, body: str) -> Any:
        ...


CredentialRefresher = Callable[[], Awaitable[Any]]


class ConnectivitySignal(Protocol):
    """Protocol for the platform connectivity signal."""

    def is_online(self) -> bool:
        """Current connectivity state."""
        ...

    def subscribe(
        self,
        on_offline: Callable[[], None],
        on_online: Callable[[], None]
    ) -> Callable[[], None]:
        """Register for transitions. Returns a function that detaches the callbacks."""
        ...
