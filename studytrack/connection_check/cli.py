"""CLI entry point for the setup connection checks."""

import asyncio
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Optional

import typer

from studytrack.connection_check.config_loader import (
    load_config_from_env,
    load_connection_config,
    load_probe_settings,
)
from studytrack.connection_check.health import HealthChecker
from studytrack.connection_check.models.outcome import TestReport, ValidationOutcome
from studytrack.connection_check.models.service_config import ConnectionTestConfig
from studytrack.connection_check.orchestrator import ConnectionTestOrchestrator
from studytrack.connection_check.redaction import SecretRedactingFilter
from studytrack.connection_check.validators import (
    validate_anthropic_api_key,
    validate_gemini_api_key,
    validate_neon_connection_string,
    validate_openai_api_key,
    validate_qdrant_api_key,
    validate_qdrant_url,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
    force=True,
)
redacting_filter = SecretRedactingFilter()
for handler in logging.getLogger().handlers:
    handler.addFilter(redacting_filter)
logger = logging.getLogger(__name__)

app = typer.Typer()

VALIDATORS: dict[str, Callable[[str], ValidationOutcome]] = {
    "neon": validate_neon_connection_string,
    "qdrant-url": validate_qdrant_url,
    "qdrant-key": validate_qdrant_api_key,
    "gemini": validate_gemini_api_key,
    "openai": validate_openai_api_key,
    "anthropic": validate_anthropic_api_key,
}


def _load_config(config_path: Path | None, from_env: bool) -> ConnectionTestConfig:
    """Load configuration from a file or the environment."""
    if config_path is not None and from_env:
        raise ValueError("Use either --config or --from-env, not both")
    if config_path is not None:
        return load_connection_config(config_path)
    if from_env:
        return load_config_from_env()
    raise ValueError("One of --config or --from-env is required")


def _log_summary(report: TestReport) -> None:
    logger.info("=" * 80)
    logger.info("Connection Test Summary:")
    logger.info("=" * 80)
    for name, result in report.results.items():
        timing = (
            f" ({result.response_time_ms}ms)"
            if result.response_time_ms is not None
            else ""
        )
        line = f"{name}: {result.status}{timing} - {result.message}"
        if result.status == "pass":
            logger.info(f"✓ {line}")
        elif result.status == "warn":
            logger.warning(f"! {line}")
        else:
            logger.error(f"✗ {line}")


@app.command()
def check(
    config_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--config", help="YAML or JSON file with service credentials"
    ),
    from_env: bool = typer.Option(
        False, "--from-env", help="Read service credentials from the environment"
    ),
    timeout: Optional[float] = typer.Option(
        None, help="Timeout for HTTP probes in seconds (default: 5)"
    ),
    db_timeout: Optional[float] = typer.Option(
        None, help="Database connect timeout in seconds (default: 5)"
    ),
) -> None:
    """Validate and probe every configured service."""
    logger.info("Setup Connection Test - Starting")

    try:
        config = _load_config(config_path, from_env)
        settings = load_probe_settings(timeout, db_timeout)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Failed to load configuration: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    redacting_filter.add_secrets(config.secret_values())

    orchestrator = ConnectionTestOrchestrator(settings)
    report = asyncio.run(orchestrator.run(config))

    _log_summary(report)
    typer.echo(json.dumps(report.model_dump(mode="json"), indent=2))

    if not report.success:
        logger.error(report.message)
        raise typer.Exit(code=1)


@app.command()
def validate(
    kind: str = typer.Argument(..., help=f"One of: {', '.join(VALIDATORS)}"),
    value: str = typer.Argument(..., help="Credential to validate"),
) -> None:
    """Check the format of a single credential without any network call."""
    validator = VALIDATORS.get(kind.lower())
    if validator is None:
        typer.echo(
            f"Error: Unknown credential kind: {kind}. "
            f"Must be one of: {', '.join(VALIDATORS)}",
            err=True,
        )
        raise typer.Exit(code=1)

    redacting_filter.add_secrets([value])
    outcome = validator(value)
    typer.echo(json.dumps(outcome.model_dump(mode="json"), indent=2))

    if not outcome.success:
        raise typer.Exit(code=1)


@app.command()
def health(
    cache_ttl: float = typer.Option(30.0, help="Seconds to cache each check"),
    timeout: Optional[float] = typer.Option(
        None, help="Timeout for HTTP probes in seconds (default: 5)"
    ),
) -> None:
    """Report health of the dependencies configured in the environment."""
    try:
        config = load_config_from_env()
        settings = load_probe_settings(timeout)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    redacting_filter.add_secrets(config.secret_values())

    checker = HealthChecker(config, settings, cache_ttl=cache_ttl)
    status = asyncio.run(checker.check())
    typer.echo(json.dumps(status.model_dump(mode="json"), indent=2))

    if status.status == "unhealthy":
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
