"""
Exceptions for the error handling system.
"""
from dataclasses import dataclass
from typing import Any


class ErrorHandlingError(Exception):
    """Base exception for the error handling system."""


@dataclass
class TransportResponse:
    """HTTP response attached to a failed request."""
    status: int
    data: Any = None


class TransportError(ErrorHandlingError):
    """Raised by HTTP clients when a request fails.

    ``response`` is None when the request never produced a response
    (connection refused, DNS failure, timeout).
    """

    def __init__(self, message: str, response: TransportResponse | None = None):
        super().__init__(message)
        self.response = response

    @property
    def status(self) -> int | None:
        return self.response.status if self.response else None


class ServiceError(ErrorHandlingError):
    """Raised when a backend service reports a failure."""

    def __init__(
        self,
        message: str,
        status: int = 500,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
        degradation_info: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.status = status
        self.code = code
        self.details = details
        self.retryable = retryable
        self.degradation_info = degradation_info


class HealthCheckError(ErrorHandlingError):
    """Raised when the health endpoint cannot be read."""

    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url
