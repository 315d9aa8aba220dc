"""
Notification sink installation and category-specific messages.
"""
import logging
from enum import Enum

from .classification import ErrorClassification
from .types import UNKNOWN_ERROR_MESSAGE, ErrorCategory, NotificationSink

logger = logging.getLogger(__name__)


class NotificationLevel(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


# Display names for service identifiers reported by the backend
SERVICE_DISPLAY_NAMES = {
    "github": "GitHub",
    "llm": "AI",
    "ai": "AI",
    "database": "Database",
}

_installed_sink: NotificationSink | None = None


def set_notification_sink(sink: NotificationSink | None) -> None:
    """Install the process-wide notification sink. None uninstalls it."""
    global _installed_sink
    _installed_sink = sink


def get_notification_sink() -> NotificationSink | None:
    return _installed_sink


def service_display_name(service: str) -> str:
    return SERVICE_DISPLAY_NAMES.get(service.lower(), service.title())


class Notifier:
    """Pushes messages to a notification sink.

    Uses the sink given at construction, or the process-wide sink installed
    via ``set_notification_sink`` at the time of each call. Without either,
    notifications are dropped.
    """

    def __init__(self, sink: NotificationSink | None = None):
        self._sink = sink

    @property
    def sink(self) -> NotificationSink | None:
        return self._sink if self._sink is not None else get_notification_sink()

    def notify(self, level: NotificationLevel, title: str, body: str) -> bool:
        """Send one notification. Returns False when nothing received it."""
        sink = self.sink
        if sink is None:
            logger.debug(f"No notification sink installed, dropping {level.value}: {title}: {body}")
            return False

        method = getattr(sink, f"show_{level.value}")
        method(title, body)
        return True

    def error(self, title: str, body: str) -> bool:
        return self.notify(NotificationLevel.ERROR, title, body)

    def warning(self, title: str, body: str) -> bool:
        return self.notify(NotificationLevel.WARNING, title, body)

    def info(self, title: str, body: str) -> bool:
        return self.notify(NotificationLevel.INFO, title, body)

    def success(self, title: str, body: str) -> bool:
        return self.notify(NotificationLevel.SUCCESS, title, body)

    def notify_error(
        self,
        classification: ErrorClassification,
        user_message: str,
        service_name: str | None = None
    ) -> bool:
        """Send the notification for a classified error."""
        level, title, body = build_error_notification(classification, user_message, service_name)
        return self.notify(level, title, body)


def build_error_notification(
    classification: ErrorClassification,
    user_message: str,
    service_name: str | None = None
) -> tuple[NotificationLevel, str, str]:
    """Derive level, title and body from the error category."""
    descriptor = classification.descriptor
    category = classification.category

    if category == ErrorCategory.AUTHENTICATION:
        return NotificationLevel.ERROR, "Authentication Required", user_message

    if category == ErrorCategory.VALIDATION:
        if descriptor.field_errors:
            body = ", ".join(
                f"{field}: {message}" for field, message in descriptor.field_errors.items()
            )
        else:
            body = user_message
        return NotificationLevel.ERROR, "Invalid Input", body

    if category == ErrorCategory.RATE_LIMIT:
        return NotificationLevel.WARNING, "Rate Limited", user_message

    if category == ErrorCategory.SERVICE_UNAVAILABLE:
        if service_name is None and descriptor.details:
            raw = descriptor.details.get("service")
            service_name = raw if isinstance(raw, str) and raw else None

        if service_name:
            title = f"{service_display_name(service_name)} Service Issue"
        else:
            title = "Service Unavailable"
        return NotificationLevel.WARNING, title, user_message

    # Generic categories show the descriptor's own message; the placeholder
    # for unreadable failures is replaced by the caller's message
    if descriptor.message and descriptor.message != UNKNOWN_ERROR_MESSAGE:
        body = descriptor.message
    else:
        body = user_message

    if category == ErrorCategory.SERVER:
        return NotificationLevel.ERROR, "Server Error", body

    if category == ErrorCategory.NETWORK:
        return NotificationLevel.ERROR, "Network Error", body

    return NotificationLevel.ERROR, "Unexpected Error", body
