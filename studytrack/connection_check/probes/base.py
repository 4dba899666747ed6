"""Abstract base class for connectivity probes."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping

import aiohttp

from studytrack.connection_check.models.outcome import ProbeOutcome
from studytrack.connection_check.models.service_config import ServiceName
from studytrack.connection_check.redaction import redact_details, redact_secrets

logger = logging.getLogger(__name__)


class ConnectivityProbe(ABC):
    """One cheap, real call confirming a credential is live and authorized."""

    service: ServiceName

    def __init__(self, timeout: float) -> None:
        """Initialize probe with its overall timeout in seconds."""
        self.timeout = timeout

    @abstractmethod
    async def probe(self) -> ProbeOutcome:
        """Perform exactly one network or database call.

        Returns:
            Outcome of the call

        Raises:
            Any exception; ``run`` converts it into a failed outcome

        """

    def secrets(self) -> list[str]:
        """Return credential values that must never appear in messages."""
        return []

    async def run(self) -> ProbeOutcome:
        """Run the probe under its timeout and never raise.

        Returns:
            Probe outcome with response time and redacted message

        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        try:
            outcome = await asyncio.wait_for(self.probe(), timeout=self.timeout)
        except asyncio.TimeoutError:
            outcome = ProbeOutcome.failure(
                f"Connection timed out after {self.timeout:g} seconds",
                error_type="connectivity",
            )
        except (aiohttp.ClientError, OSError) as e:
            outcome = ProbeOutcome.failure(
                f"Connection failed: {e}", error_type="connectivity"
            )
        except Exception as e:
            logger.exception(f"Unexpected error while probing {self.service}")
            outcome = ProbeOutcome.failure(
                f"Unexpected error: {type(e).__name__}: {e}",
                error_type="unexpected",
            )

        elapsed_ms = round((loop.time() - start_time) * 1000)
        secrets = self.secrets()
        return ProbeOutcome(
            success=outcome.success,
            message=redact_secrets(outcome.message, secrets),
            details=redact_details(outcome.details, secrets),
            response_time_ms=elapsed_ms,
        )


class HttpProbe(ConnectivityProbe):
    """Probe that issues a single HTTPS request with aiohttp."""

    provider_label: str = "API"

    def _status_failure(
        self, status: int, payload: Mapping[str, object] | None, text: str
    ) -> ProbeOutcome:
        """Map a non-2xx response to a failed outcome."""
        remote_message = extract_error_message(payload) or text.strip()[:200]
        error_type = "authorization" if status in {401, 403} else "connectivity"
        message = f"{self.provider_label} test failed ({status})"
        if remote_message:
            message = f"{message}: {remote_message}"
        return ProbeOutcome.failure(message, error_type=error_type, status_code=status)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        json: object = None,
    ) -> tuple[int, Mapping[str, object] | None, str]:
        """Send one request and return status, parsed JSON (if any) and text."""
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.request(
                method, url, headers=headers, params=params, json=json
            ) as response:
                text = await response.text()
                payload: Mapping[str, object] | None = None
                try:
                    data = await response.json(content_type=None)
                except ValueError:
                    data = None
                if isinstance(data, Mapping):
                    payload = data
                return response.status, payload, text

    def _success_or_failure(
        self,
        status: int,
        payload: Mapping[str, object] | None,
        text: str,
        success_message: str,
    ) -> ProbeOutcome:
        if not 200 <= status < 300:
            return self._status_failure(status, payload, text)
        if not text.strip():
            return ProbeOutcome.failure(
                f"{self.provider_label} returned an empty response",
                error_type="unexpected",
                status_code=status,
            )
        return ProbeOutcome(
            success=True, message=success_message, details={"status_code": status}
        )


def extract_error_message(payload: Mapping[str, object] | None) -> str | None:
    """Pull the provider's error message out of a JSON error body.

    Handles ``{"error": {"message": ...}}`` (OpenAI, Gemini, Anthropic),
    ``{"error": "..."}`` and ``{"status": {"error": ...}}`` (Qdrant).
    """
    if not payload:
        return None

    for key in ("error", "status"):
        value = payload.get(key)
        if isinstance(value, str) and value and key == "error":
            return value
        if isinstance(value, Mapping):
            for inner in ("message", "error"):
                message = value.get(inner)
                if isinstance(message, str) and message:
                    return message

    message = payload.get("message")
    return message if isinstance(message, str) and message else None
