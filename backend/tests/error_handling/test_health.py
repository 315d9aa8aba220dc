"""
Tests for SystemHealthMonitor against a local aiohttp server.
"""
import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from backend.src.error_handling import ErrorHandlerConfig, SystemHealthMonitor

HEALTHY_STATUS = {
    "status": "degraded",
    "services": {
        "github": {"status": "unhealthy"},
        "database": {"status": "healthy"},
    },
    "degradation_strategies": {
        "github": {
            "strategy": "cache_fallback",
            "message": "Using cached repository data",
            "limitations": ["Data may be outdated"],
            "recovery_actions": ["Retry later"],
        }
    },
    "timestamp": "2024-05-01T12:00:00Z",
}


@pytest.fixture
def calls():
    return {"count": 0}


@pytest_asyncio.fixture
async def health_server(calls):
    """Health endpoint counting how often it is called."""

    async def health(request):
        calls["count"] += 1
        return web.json_response(HEALTHY_STATUS)

    async def broken(request):
        return web.Response(text="<html>oops</html>", content_type="text/html")

    app = web.Application()
    app.router.add_get("/health", health)
    app.router.add_get("/broken", broken)

    server = test_utils.TestServer(app)
    await server.start_server()
    yield server
    await server.close()


def monitor_for(url, interval=30.0):
    return SystemHealthMonitor(ErrorHandlerConfig(
        health_check_url=url,
        health_check_interval=interval,
        health_check_timeout=2.0
    ))


class TestSystemHealthMonitor:
    """Test cases for SystemHealthMonitor."""

    @pytest.mark.asyncio
    async def test_fetches_status(self, health_server):
        monitor = monitor_for(str(health_server.make_url("/health")))

        status = await monitor.check_system_health()

        assert status["status"] == "degraded"
        assert monitor.is_service_healthy("database") is True
        assert monitor.is_service_healthy("github") is False
        assert monitor.get_degradation_info("github")["strategy"] == "cache_fallback"
        assert monitor.get_degradation_info("database") is None

    @pytest.mark.asyncio
    async def test_caches_within_interval(self, health_server, calls):
        monitor = monitor_for(str(health_server.make_url("/health")))

        await monitor.check_system_health()
        await monitor.check_system_health()

        assert calls["count"] == 1

    @pytest.mark.asyncio
    async def test_force_refresh(self, health_server, calls):
        monitor = monitor_for(str(health_server.make_url("/health")))

        await monitor.check_system_health()
        await monitor.check_system_health(force=True)

        assert calls["count"] == 2

    @pytest.mark.asyncio
    async def test_expired_cache_refetches(self, health_server, calls):
        monitor = monitor_for(str(health_server.make_url("/health")), interval=0.0)

        await monitor.check_system_health()
        await monitor.check_system_health()

        assert calls["count"] == 2

    @pytest.mark.asyncio
    async def test_invalid_document_is_unhealthy(self, health_server):
        monitor = monitor_for(str(health_server.make_url("/broken")))

        status = await monitor.check_system_health()

        assert status["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_unreachable_endpoint(self):
        monitor = monitor_for("http://127.0.0.1:1/health")

        status = await monitor.check_system_health()

        assert status["status"] == "unhealthy"
        assert status["services"]["api"]["error"] == "Cannot reach API"
        assert monitor.is_service_healthy("api") is False

    def test_no_status_yet(self):
        monitor = SystemHealthMonitor()

        assert monitor.status is None
        assert monitor.get_degradation_info("github") is None
        assert monitor.is_service_healthy("github") is False
