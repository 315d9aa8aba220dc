"""Main error classifier implementation."""
import logging

from ..types import ErrorCategory, ErrorDescriptor, ErrorSeverity
from .categories import CATEGORY_SEVERITY, ErrorClassification, StatusPattern
from .patterns import STATUS_PATTERNS

logger = logging.getLogger(__name__)


class ErrorClassifier:
    """Classifies error descriptors into a category and severity."""

    def __init__(self, custom_patterns: list[StatusPattern] | None = None):
        """Initialize classifier with status patterns.

        Args:
            custom_patterns: Patterns checked before the predefined ones

        """
        self.patterns = list(custom_patterns or []) + STATUS_PATTERNS

    def classify(self, descriptor: ErrorDescriptor) -> ErrorClassification:
        """Classify a descriptor.

        A category declared by the server is trusted as-is. Otherwise the
        status code decides; descriptors without a status are network errors.
        """
        category = descriptor.category or self._category_from_status(descriptor.status_code)
        severity = self._severity(category, descriptor)

        logger.debug(
            f"Classified error '{descriptor.message}' (status={descriptor.status_code}) "
            f"as {category.value}/{severity.value}"
        )

        return ErrorClassification(descriptor=descriptor, category=category, severity=severity)

    def add_pattern(self, pattern: StatusPattern) -> None:
        """Add a custom pattern ahead of the existing ones."""
        self.patterns.insert(0, pattern)

    def _category_from_status(self, status_code: int | None) -> ErrorCategory:
        if status_code is None:
            return ErrorCategory.NETWORK

        for pattern in self.patterns:
            if pattern.matches(status_code):
                return pattern.category

        return ErrorCategory.UNKNOWN

    def _severity(self, category: ErrorCategory, descriptor: ErrorDescriptor) -> ErrorSeverity:
        severity = CATEGORY_SEVERITY.get(category, ErrorSeverity.MEDIUM)

        # Unrecoverable server-side failures
        if (
            severity == ErrorSeverity.HIGH
            and descriptor.status_code is not None
            and descriptor.status_code >= 500
            and descriptor.recovery_hint is None
        ):
            return ErrorSeverity.CRITICAL

        return severity
