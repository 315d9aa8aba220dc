"""Classification result types and category defaults."""
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..types import ErrorCategory, ErrorDescriptor, ErrorSeverity


# Severity assigned to each category before status-based escalation
CATEGORY_SEVERITY: dict[ErrorCategory, ErrorSeverity] = {
    ErrorCategory.AUTHENTICATION: ErrorSeverity.HIGH,
    ErrorCategory.SERVER: ErrorSeverity.HIGH,
    ErrorCategory.RATE_LIMIT: ErrorSeverity.MEDIUM,
    ErrorCategory.SERVICE_UNAVAILABLE: ErrorSeverity.MEDIUM,
    ErrorCategory.VALIDATION: ErrorSeverity.LOW,
    ErrorCategory.NETWORK: ErrorSeverity.MEDIUM,
    ErrorCategory.UNKNOWN: ErrorSeverity.MEDIUM,
}

TRANSIENT_CATEGORIES = frozenset({
    ErrorCategory.RATE_LIMIT,
    ErrorCategory.NETWORK,
    ErrorCategory.SERVICE_UNAVAILABLE,
    ErrorCategory.SERVER,
})


@dataclass(frozen=True)
class StatusPattern:
    """Maps a set or range of HTTP status codes to a category."""

    category: ErrorCategory
    status_codes: frozenset[int] = frozenset()
    status_range: range | None = None

    def matches(self, status_code: int) -> bool:
        if status_code in self.status_codes:
            return True
        return self.status_range is not None and status_code in self.status_range


@dataclass(frozen=True)
class ErrorClassification:
    """Result of error classification."""

    descriptor: ErrorDescriptor
    category: ErrorCategory
    severity: ErrorSeverity

    @property
    def is_retryable(self) -> bool:
        """Check if the error is likely transient."""
        return self.category in TRANSIENT_CATEGORIES

    @property
    def fingerprint(self) -> str:
        """Coarse key used to aggregate repeated failures."""
        if self.descriptor.status_code is not None:
            suffix = str(self.descriptor.status_code)
        elif self.descriptor.code:
            suffix = self.descriptor.code
        else:
            suffix = "none"
        return f"{self.category.value}:{suffix}"

    @property
    def timestamp(self) -> datetime:
        return self.descriptor.timestamp

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "fingerprint": self.fingerprint,
            "is_retryable": self.is_retryable,
            "descriptor": self.descriptor.to_dict(),
        }
