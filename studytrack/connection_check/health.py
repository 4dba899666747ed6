"""Health-check aggregator for the configured dependencies."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from studytrack.connection_check.models.health import HealthCheck, HealthStatus
from studytrack.connection_check.models.outcome import ProbeOutcome
from studytrack.connection_check.models.service_config import (
    ConnectionTestConfig,
    ProbeSettings,
    ServiceConfig,
    ServiceName,
)
from studytrack.connection_check.probes.base import ConnectivityProbe
from studytrack.connection_check.probes.factory import create_probe

logger = logging.getLogger(__name__)

AI_SERVICES: tuple[ServiceName, ...] = ("llm", "transcription", "embeddings")


def _check_from_outcome(outcome: ProbeOutcome, name: str) -> HealthCheck:
    if outcome.success:
        return HealthCheck(
            status="pass",
            message=f"{name} connection successful",
            response_time_ms=outcome.response_time_ms,
        )
    return HealthCheck(
        status="fail",
        message=f"{name} connection failed",
        response_time_ms=outcome.response_time_ms,
        details={"error": outcome.message},
    )


class HealthChecker:
    """Runs dependency checks, caching each result for ``cache_ttl`` seconds."""

    def __init__(
        self,
        config: ConnectionTestConfig,
        settings: ProbeSettings | None = None,
        cache_ttl: float = 30.0,
        probe_factory: Callable[
            [ServiceConfig, ProbeSettings], ConnectivityProbe
        ] = create_probe,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize checker for a configuration."""
        self.config = config
        self.settings = settings or ProbeSettings()
        self.cache_ttl = cache_ttl
        self.probe_factory = probe_factory
        self.clock = clock
        self._cache: dict[str, tuple[float, HealthCheck]] = {}

    async def check(self) -> HealthStatus:
        """Run all checks concurrently and aggregate their status."""
        database, vector_database, ai_services = await asyncio.gather(
            self._cached("database", self._check_database),
            self._cached("vectorDatabase", self._check_vector_database),
            self._cached("aiServices", self._check_ai_services),
        )
        checks = {
            "database": database,
            "vectorDatabase": vector_database,
            "aiServices": ai_services,
        }

        statuses = {check.status for check in checks.values()}
        if "fail" in statuses:
            status = "unhealthy"
        elif "warn" in statuses:
            status = "degraded"
        else:
            status = "healthy"

        logger.info(f"Health check completed: {status}")
        return HealthStatus(status=status, checks=checks)

    def clear_cache(self) -> None:
        """Drop all cached results."""
        self._cache.clear()

    async def _cached(
        self, key: str, check: Callable[[], Awaitable[HealthCheck]]
    ) -> HealthCheck:
        cached = self._cache.get(key)
        now = self.clock()
        if cached is not None and now - cached[0] < self.cache_ttl:
            return cached[1]

        result = await check()
        self._cache[key] = (now, result)
        return result

    async def _check_database(self) -> HealthCheck:
        if self.config.neon is None:
            return HealthCheck(status="warn", message="Database not configured")
        outcome = await self.probe_factory(self.config.neon, self.settings).run()
        return _check_from_outcome(outcome, "Database")

    async def _check_vector_database(self) -> HealthCheck:
        if self.config.qdrant is None:
            return HealthCheck(status="warn", message="Vector database not configured")
        outcome = await self.probe_factory(self.config.qdrant, self.settings).run()
        return _check_from_outcome(outcome, "Vector database")

    async def _check_ai_services(self) -> HealthCheck:
        configs: dict[str, ServiceConfig] = {}
        for name in AI_SERVICES:
            config = self.config.get(name)
            if config is not None:
                configs[name] = config
        if not configs:
            return HealthCheck(status="warn", message="No AI services configured")

        start = self.clock()
        probes = [
            self.probe_factory(config, self.settings) for config in configs.values()
        ]
        outcomes = await asyncio.gather(*(probe.run() for probe in probes))
        response_time_ms = round((self.clock() - start) * 1000)

        services = [
            {"name": name, "status": "pass" if outcome.success else "fail"}
            for name, outcome in zip(configs, outcomes, strict=True)
        ]
        if all(outcome.success for outcome in outcomes):
            return HealthCheck(
                status="pass",
                message="All AI services accessible",
                response_time_ms=response_time_ms,
                details={"services": services},
            )
        return HealthCheck(
            status="fail",
            message="Some AI services failed",
            response_time_ms=response_time_ms,
            details={"services": services},
        )
