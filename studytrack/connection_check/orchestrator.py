"""Connection test orchestrator for the services entered during setup."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from studytrack.connection_check.models.outcome import (
    ProbeOutcome,
    ServiceTestResult,
    TestReport,
    ValidationOutcome,
)
from studytrack.connection_check.models.service_config import (
    SERVICE_ORDER,
    ConnectionTestConfig,
    ProbeSettings,
    ServiceConfig,
    ServiceName,
)
from studytrack.connection_check.probes.base import ConnectivityProbe
from studytrack.connection_check.probes.factory import create_probe
from studytrack.connection_check.validators import validate_service

logger = logging.getLogger(__name__)

ProbeFactory = Callable[[ServiceConfig, ProbeSettings], ConnectivityProbe]

DEFAULT_REQUIRED: dict[ServiceName, bool] = {
    "neon": True,
    "qdrant": True,
    "transcription": False,
    "llm": True,
    "embeddings": False,
}


def _result(
    service: ServiceName,
    required: bool,
    outcome: ValidationOutcome,
) -> ServiceTestResult:
    """Build a service result, downgrading optional failures to warnings."""
    if outcome.success:
        status = "pass"
    else:
        status = "fail" if required else "warn"

    response_time_ms = (
        outcome.response_time_ms if isinstance(outcome, ProbeOutcome) else None
    )
    return ServiceTestResult(
        service=service,
        status=status,
        success=outcome.success,
        required=required,
        message=outcome.message,
        details=outcome.details,
        response_time_ms=response_time_ms,
    )


class ConnectionTestOrchestrator:
    """Validates and probes every configured service and builds a report."""

    def __init__(
        self,
        settings: ProbeSettings | None = None,
        probe_factory: ProbeFactory = create_probe,
    ) -> None:
        """Initialize orchestrator with probe settings."""
        self.settings = settings or ProbeSettings()
        self.probe_factory = probe_factory

    async def run(self, config: ConnectionTestConfig) -> TestReport:
        """Run format validation then connectivity probes for all services.

        Args:
            config: Services entered in the setup wizard

        Returns:
            Report with one result per service; never raises

        """
        logger.info("Orchestrator: Validating credential formats...")
        results: dict[ServiceName, ServiceTestResult] = {}
        pending: dict[ServiceName, Awaitable[ServiceTestResult]] = {}

        for service in SERVICE_ORDER:
            service_config = config.get(service)
            if service_config is None:
                results[service] = self._not_configured(service)
                continue

            required = service_config.required
            validation = validate_service(service_config)
            if not validation.success:
                logger.info(f"Format check failed for {service}: {validation.message}")
                results[service] = _result(service, required, validation)
                continue

            pending[service] = self._probe_service(service, service_config)

        logger.info(f"Probing {len(pending)} services...")
        outcomes = await asyncio.gather(*pending.values(), return_exceptions=True)
        results.update(self._process_results(list(pending), list(outcomes), config))

        ordered = {service: results[service] for service in SERVICE_ORDER}
        return self._build_report(ordered)

    async def _probe_service(
        self, service: ServiceName, service_config: ServiceConfig
    ) -> ServiceTestResult:
        """Run one service's probe and wrap the outcome."""
        probe = self.probe_factory(service_config, self.settings)
        logger.info(f"Probing {service} with {type(probe).__name__}")
        outcome = await probe.run()
        return _result(service, service_config.required, outcome)

    def _process_results(
        self,
        services: list[ServiceName],
        outcomes: list[ServiceTestResult | BaseException],
        config: ConnectionTestConfig,
    ) -> dict[ServiceName, ServiceTestResult]:
        """Turn gathered outcomes into results, converting stray exceptions."""
        results: dict[ServiceName, ServiceTestResult] = {}
        for service, outcome in zip(services, outcomes, strict=True):
            if isinstance(outcome, ServiceTestResult):
                logger.info(f"Probe result: {service} = {outcome.status}")
                results[service] = outcome
                continue

            logger.error(
                f"Probe error for {service}: {type(outcome).__name__}",
                exc_info=outcome,
            )
            service_config = config.get(service)
            required = (
                service_config.required
                if service_config is not None
                else DEFAULT_REQUIRED[service]
            )
            results[service] = _result(
                service,
                required,
                ProbeOutcome.failure(
                    f"Unexpected error while testing {service}",
                    error_type="unexpected",
                ),
            )
        return results

    def _not_configured(self, service: ServiceName) -> ServiceTestResult:
        required = DEFAULT_REQUIRED[service]
        return _result(
            service,
            required,
            ValidationOutcome.failure(
                f"{service} is not configured", configured=False
            ),
        )

    def _build_report(
        self, results: dict[ServiceName, ServiceTestResult]
    ) -> TestReport:
        failed = [
            name
            for name, result in results.items()
            if result.required and not result.success
        ]
        if failed:
            message = f"One or more required connections failed: {', '.join(failed)}"
            logger.error(message)
        else:
            message = "All required connections successful"
            logger.info(message)

        return TestReport(success=not failed, message=message, results=results)
