"""Predefined status code patterns for classification."""
from ..types import ErrorCategory
from .categories import StatusPattern

# Evaluated in order; the first match wins, so 503 must precede the 5xx range.
STATUS_PATTERNS: list[StatusPattern] = [
    StatusPattern(
        category=ErrorCategory.AUTHENTICATION,
        status_codes=frozenset({401, 403}),
    ),
    StatusPattern(
        category=ErrorCategory.VALIDATION,
        status_codes=frozenset({422}),
    ),
    StatusPattern(
        category=ErrorCategory.RATE_LIMIT,
        status_codes=frozenset({429}),
    ),
    StatusPattern(
        category=ErrorCategory.SERVICE_UNAVAILABLE,
        status_codes=frozenset({503}),
    ),
    StatusPattern(
        category=ErrorCategory.SERVER,
        status_range=range(500, 600),
    ),
]
