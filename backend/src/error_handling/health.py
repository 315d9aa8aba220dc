"""
System health monitoring against the backend health endpoint.
"""
import asyncio
import logging
import time
from datetime import UTC, datetime
from typing import Any

import aiohttp

from .config import ErrorHandlerConfig
from .exceptions import HealthCheckError

logger = logging.getLogger(__name__)


class SystemHealthMonitor:
    """Fetches and caches the backend health status.

    The status document looks like::

        {
            "status": "healthy" | "degraded" | "unhealthy",
            "services": {"github": {"status": "healthy"}, ...},
            "degradation_strategies": {
                "github": {"strategy": ..., "message": ...,
                           "limitations": [...], "recovery_actions": [...]}
            },
            "timestamp": "..."
        }
    """

    def __init__(self, config: ErrorHandlerConfig | None = None):
        self.config = config or ErrorHandlerConfig()
        self._status: dict[str, Any] | None = None
        self._last_check: float | None = None
        self._lock = asyncio.Lock()

    @property
    def status(self) -> dict[str, Any] | None:
        """Last fetched status, if any."""
        return self._status

    async def check_system_health(self, force: bool = False) -> dict[str, Any]:
        """Return the health status, refreshing it when the cache is stale.

        An unreachable endpoint yields a cached ``unhealthy`` status rather
        than an exception.
        """
        async with self._lock:
            if not force and self._is_fresh():
                return self._status

            try:
                status = await self._fetch()
            except HealthCheckError as e:
                logger.warning(f"Health check failed: {e}")
                status = {
                    "status": "unhealthy",
                    "services": {
                        "api": {"status": "unhealthy", "error": "Cannot reach API"}
                    },
                    "timestamp": datetime.now(UTC).isoformat(),
                }

            self._status = status
            self._last_check = time.monotonic()
            return status

    def get_degradation_info(self, service_name: str) -> dict[str, Any] | None:
        if not self._status:
            return None
        strategies = self._status.get("degradation_strategies") or {}
        return strategies.get(service_name)

    def is_service_healthy(self, service_name: str) -> bool:
        if not self._status:
            return False
        service = (self._status.get("services") or {}).get(service_name) or {}
        return service.get("status") == "healthy"

    def _is_fresh(self) -> bool:
        if self._status is None or self._last_check is None:
            return False
        return (time.monotonic() - self._last_check) < self.config.health_check_interval

    async def _fetch(self) -> dict[str, Any]:
        url = self.config.health_check_url
        timeout = aiohttp.ClientTimeout(total=self.config.health_check_timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url) as response:
                    data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise HealthCheckError(f"Cannot read health status: {e}", url) from e

        if not isinstance(data, dict):
            raise HealthCheckError("Health endpoint returned a non-object document", url)

        return data
