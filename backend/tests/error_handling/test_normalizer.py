"""
Tests for error normalization.
"""
from datetime import UTC, datetime

import aiohttp
import pytest

from backend.src.error_handling import (
    ErrorCategory,
    RecoveryStrategyName,
    ServiceError,
    TransportError,
    normalize,
)
from backend.src.error_handling.types import UNKNOWN_ERROR_MESSAGE


class TestTransportErrors:
    """Errors carrying an HTTP response."""

    def test_structured_body(self, http_error):
        """Test that nested error fields are copied."""
        error = http_error(401, {
            "error": {
                "message": "Authentication required",
                "code": "AUTH_REQUIRED",
                "category": "authentication",
                "timestamp": "2024-05-01T12:00:00Z",
                "details": {"realm": "api"},
                "recovery": {
                    "strategy": "token_refresh",
                    "user_message": "Session expired",
                    "actions": ["Refresh token", "Log in again"],
                    "retry_enabled": True,
                },
            }
        })

        descriptor = normalize(error)

        assert descriptor.message == "Authentication required"
        assert descriptor.status_code == 401
        assert descriptor.code == "AUTH_REQUIRED"
        assert descriptor.category == ErrorCategory.AUTHENTICATION
        assert descriptor.timestamp == datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        assert descriptor.details == {"realm": "api"}

        hint = descriptor.recovery_hint
        assert hint.strategy == RecoveryStrategyName.TOKEN_REFRESH
        assert hint.user_message == "Session expired"
        assert hint.actions == ("Refresh token", "Log in again")
        assert hint.retry_enabled is True

    def test_field_errors(self, http_error):
        """Test that validation field errors are kept verbatim."""
        error = http_error(422, {
            "error": {
                "message": "Validation failed",
                "field_errors": {
                    "email": "Invalid email format",
                    "password": "Password too short",
                },
            }
        })

        descriptor = normalize(error)

        assert descriptor.field_errors == {
            "email": "Invalid email format",
            "password": "Password too short",
        }
        assert descriptor.category is None

    def test_flat_body(self, http_error):
        """Test that a flat message body leaves category and hint empty."""
        descriptor = normalize(http_error(429, {"message": "Too many requests"}))

        assert descriptor.message == "Too many requests"
        assert descriptor.status_code == 429
        assert descriptor.category is None
        assert descriptor.recovery_hint is None

    def test_flat_detail_body(self, http_error):
        descriptor = normalize(http_error(404, {"detail": "Not found"}))
        assert descriptor.message == "Not found"

    def test_missing_body_uses_exception_message(self, http_error):
        descriptor = normalize(http_error(500, message="Error 1"))

        assert descriptor.message == "Error 1"
        assert descriptor.status_code == 500

    def test_malformed_fields_are_ignored(self, http_error):
        """Test that wrong types are treated as absent."""
        error = http_error(503, {
            "error": {
                "message": 42,
                "category": "not-a-category",
                "timestamp": "yesterday",
                "details": ["not", "a", "mapping"],
                "recovery": "token_refresh",
                "field_errors": "email invalid",
            }
        })

        descriptor = normalize(error)

        assert descriptor.message == "Request failed"
        assert descriptor.category is None
        assert descriptor.details is None
        assert descriptor.recovery_hint is None
        assert descriptor.field_errors is None
        assert descriptor.timestamp.tzinfo is not None

    def test_unknown_strategy_maps_to_none(self, http_error):
        error = http_error(500, {
            "error": {"message": "x", "recovery": {"strategy": "reboot", "retry_enabled": True}}
        })
        assert normalize(error).recovery_hint.strategy == RecoveryStrategyName.NONE

    def test_response_with_json_method(self):
        """Test clients whose responses expose ``status_code`` and ``json()``."""
        class Response:
            status_code = 429

            def json(self):
                return {"message": "Slow down"}

        class ClientError(Exception):
            def __init__(self):
                super().__init__("429 Too Many Requests")
                self.response = Response()

        descriptor = normalize(ClientError())

        assert descriptor.status_code == 429
        assert descriptor.message == "Slow down"

    def test_response_json_failure(self):
        class Response:
            status = 502

            def json(self):
                raise ValueError("not json")

        class ClientError(Exception):
            response = Response()

        descriptor = normalize(ClientError("Bad gateway"))

        assert descriptor.status_code == 502
        assert descriptor.message == "Bad gateway"

    def test_aiohttp_response_error(self):
        error = aiohttp.ClientResponseError(
            request_info=None,
            history=(),
            status=503,
            message="Service Unavailable"
        )

        descriptor = normalize(error)

        assert descriptor.status_code == 503

    def test_transport_error_without_response(self):
        descriptor = normalize(TransportError("Connection refused"))

        assert descriptor.status_code is None
        assert descriptor.message == "Connection refused"


class TestOtherValues:
    """Generic exceptions, raw bodies and arbitrary values."""

    def test_generic_exception(self):
        descriptor = normalize(RuntimeError("Something went wrong"))

        assert descriptor.message == "Something went wrong"
        assert descriptor.status_code is None

    def test_exception_without_message(self):
        assert normalize(ValueError()).message == UNKNOWN_ERROR_MESSAGE

    def test_service_error(self):
        error = ServiceError("GitHub down", status=503, code="GITHUB_SERVICE_ERROR",
                             details={"service": "github"})

        descriptor = normalize(error)

        assert descriptor.status_code == 503
        assert descriptor.code == "GITHUB_SERVICE_ERROR"
        assert descriptor.details["service"] == "github"

    def test_raw_error_body(self, api_error_body):
        body = api_error_body(
            "Rate limited", "RATE_LIMIT_EXCEEDED", "rate_limit",
            strategy="rate_limit_backoff", details={"retry_after": 1}
        )

        descriptor = normalize(body)

        assert descriptor.status_code is None
        assert descriptor.category == ErrorCategory.RATE_LIMIT
        assert descriptor.recovery_hint.strategy == RecoveryStrategyName.RATE_LIMIT_BACKOFF
        assert descriptor.details["retry_after"] == 1

    def test_raw_body_with_status(self):
        descriptor = normalize({"status": 429, "message": "Too many requests"})
        assert descriptor.status_code == 429

    @pytest.mark.parametrize("value", ["string error", 42, None, ["a"], object()])
    def test_arbitrary_values(self, value):
        descriptor = normalize(value)

        assert descriptor.message == UNKNOWN_ERROR_MESSAGE
        assert descriptor.status_code is None

    def test_exploding_attribute_access(self):
        """Test that errors raised while inspecting a value are contained."""
        class Hostile(Exception):
            @property
            def response(self):
                raise RuntimeError("boom")

        descriptor = normalize(Hostile("hostile"))

        assert descriptor.message == UNKNOWN_ERROR_MESSAGE


class TestDescriptorImmutability:
    """Descriptors cannot be changed after creation."""

    def test_frozen(self):
        descriptor = normalize(RuntimeError("x"))
        with pytest.raises(AttributeError):
            descriptor.message = "y"

    def test_details_read_only(self, http_error):
        source = {"error": {"message": "x", "details": {"service": "github"}}}
        descriptor = normalize(http_error(503, source))

        with pytest.raises(TypeError):
            descriptor.details["service"] = "other"

        # Later changes to the source body do not leak in
        source["error"]["details"]["service"] = "changed"
        assert descriptor.details["service"] == "github"
