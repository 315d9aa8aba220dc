"""
Bounded retry wrappers for async operations.
"""
import asyncio
import logging
import traceback
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from .classification import ErrorClassifier
from .normalizer import normalize
from .strategies import ExponentialBackoff, FixedDelay
from .types import T

logger = logging.getLogger(__name__)

_classifier = ErrorClassifier()


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    context: Mapping[str, Any] | None = None,
    max_retries: int = 3
) -> T:
    """Run ``operation`` until it succeeds, at most ``max_retries`` times.

    The operation is always invoked at least once. There is no delay between
    attempts. When the final attempt fails its exception propagates.
    """
    attempts = max(1, max_retries)
    label = _describe(operation, context)

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except Exception as e:
            if attempt >= attempts:
                logger.error(f"{label} failed after {attempt} attempts: {e}")
                raise
            logger.warning(f"{label} failed (attempt {attempt}/{attempts}): {e}")
            logger.debug(f"Traceback: {traceback.format_exc()}")

    # Unreachable: the loop either returns or raises
    raise RuntimeError("execute_with_retry exited without a result")


def get_retry_delay(attempt: int, base_delay: float = 1.0) -> float:
    """Exponential delay with up to 10% jitter, capped at 30 seconds.

    Args:
        attempt: Number of the attempt that just failed (1-indexed)
        base_delay: Delay after the first failure, in seconds

    """
    return ExponentialBackoff(base_delay=base_delay, max_delay=30.0).calculate_delay(attempt)


def default_should_retry(error: BaseException, attempt: int) -> bool:
    """Retry transient failures only (network, rate limit, 5xx)."""
    classification = _classifier.classify(normalize(error))
    return classification.is_retryable


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay: float = 1.0,
    *,
    on_retry: Callable[[int, BaseException], None] | None = None,
    should_retry: Callable[[BaseException, int], bool] | None = None,
    exponential_backoff: bool = True
) -> T:
    """Run ``fn`` with backoff between attempts.

    Stops early, re-raising, when ``should_retry`` rejects the failure.
    ``on_retry`` is called with the failed attempt number before each wait.
    """
    should_retry = should_retry or default_should_retry
    policy = (
        ExponentialBackoff(base_delay=base_delay)
        if exponential_backoff
        else FixedDelay(delay=base_delay)
    )
    attempts = max(1, max_retries)

    for attempt in range(1, attempts + 1):
        try:
            return await fn()
        except Exception as e:
            if attempt >= attempts or not should_retry(e, attempt):
                raise

            if on_retry:
                on_retry(attempt, e)

            delay = policy.calculate_delay(attempt)
            logger.info(f"Retrying after {delay:.2f}s ({policy.name}, attempt {attempt}/{attempts})")
            await asyncio.sleep(delay)

    raise RuntimeError("with_retry exited without a result")


def _describe(operation: Callable, context: Mapping[str, Any] | None) -> str:
    name = getattr(operation, "__qualname__", None) or type(operation).__name__
    if context and context.get("endpoint"):
        return f"{name} ({context.get('method', 'GET')} {context['endpoint']})"
    return name
