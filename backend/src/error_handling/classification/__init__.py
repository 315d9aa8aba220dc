"""Error classification system."""
from .categories import (
    CATEGORY_SEVERITY,
    TRANSIENT_CATEGORIES,
    ErrorClassification,
    StatusPattern,
)
from .classifier import ErrorClassifier
from .patterns import STATUS_PATTERNS

__all__ = [
    "ErrorClassifier",
    "ErrorClassification",
    "StatusPattern",
    "STATUS_PATTERNS",
    "CATEGORY_SEVERITY",
    "TRANSIENT_CATEGORIES",
]
