"""Graceful degradation helpers."""
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from inspect import isawaitable

from .exceptions import ServiceError
from .health import SystemHealthMonitor
from .types import T

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceRecovery:
    """Outcome of recover_from_service_error."""
    recovered: bool
    strategy: str
    message: str


async def with_fallback(
    primary: Callable[[], Awaitable[T]],
    fallback: Callable[[], Awaitable[T] | T],
    *,
    service_name: str | None = None,
    health_monitor: SystemHealthMonitor | None = None,
    log_error: bool = True
) -> T:
    """Run ``primary``; on failure return the result of ``fallback``.

    When a health monitor knows a degradation strategy for the service it is
    logged alongside the failure.
    """
    try:
        return await primary()
    except Exception as e:
        if log_error:
            target = f" for {service_name}" if service_name else ""
            logger.warning(f"Primary function failed{target}, using fallback: {e}")

        if service_name and health_monitor is not None:
            degradation = health_monitor.get_degradation_info(service_name)
            if degradation:
                logger.info(f"Service degradation strategy for {service_name}: {degradation}")

        result = fallback()
        if isawaitable(result):
            return await result
        return result


def recover_from_service_error(
    error: ServiceError,
    *,
    enable_cache: bool = True,
    enable_simplified_mode: bool = True,
    enable_offline_mode: bool = False
) -> ServiceRecovery:
    """Pick a degradation mode for a known service failure code."""
    if error.code == "GITHUB_SERVICE_ERROR" and enable_cache:
        return ServiceRecovery(
            recovered=True,
            strategy="cache_fallback",
            message="Using cached repository data. Some information may be outdated."
        )

    if error.code == "AI_SERVICE_UNAVAILABLE" and enable_simplified_mode:
        return ServiceRecovery(
            recovered=True,
            strategy="simplified_mode",
            message="AI features temporarily limited. Using simplified explanations."
        )

    if error.code == "DATABASE_UNAVAILABLE" and enable_offline_mode:
        return ServiceRecovery(
            recovered=True,
            strategy="offline_mode",
            message="Running in offline mode. Changes will sync when connection is restored."
        )

    return ServiceRecovery(
        recovered=False,
        strategy="none",
        message="No recovery strategy available. Please try again later."
    )
