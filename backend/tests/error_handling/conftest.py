"""
Shared fixtures for error handling tests.
"""
from datetime import UTC, datetime
from unittest.mock import Mock

import pytest

from backend.src.error_handling import (
    ErrorHandler,
    ErrorHandlerConfig,
    TransportError,
    TransportResponse,
    set_credential_refresher,
    set_notification_sink,
)


@pytest.fixture
def mock_sink():
    """Notification sink recording every call; installed process-wide."""
    sink = Mock(spec=["show_error", "show_warning", "show_info", "show_success"])
    set_notification_sink(sink)
    yield sink
    set_notification_sink(None)


@pytest.fixture(autouse=True)
def reset_credential_refresher():
    yield
    set_credential_refresher(None)


@pytest.fixture
def handler(mock_sink):
    return ErrorHandler(ErrorHandlerConfig())


@pytest.fixture
def http_error():
    """Factory for transport errors with a response."""
    def build(status, data=None, message="Request failed"):
        return TransportError(message, TransportResponse(status=status, data=data))
    return build


@pytest.fixture
def api_error_body():
    """Factory for structured ``{"error": {...}}`` bodies."""
    return build_error_body


def build_error_body(message, code, category, strategy=None, details=None, **extra):
    """Build a structured ``{"error": {...}}`` body."""
    error = {
        "message": message,
        "code": code,
        "category": category,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    if strategy:
        error["recovery"] = {
            "strategy": strategy,
            "user_message": extra.pop("user_message", "Please retry"),
            "actions": extra.pop("actions", ["Retry"]),
            "retry_enabled": extra.pop("retry_enabled", True),
        }
    if details is not None:
        error["details"] = details
    error.update(extra)
    return {"error": error}
