"""Probes for providers that are not called over the network."""

from urllib.parse import urlparse

from studytrack.connection_check.models.outcome import ProbeOutcome
from studytrack.connection_check.models.service_config import (
    EmbeddingsConfig,
    LLMConfig,
    ServiceName,
    TranscriptionConfig,
)
from studytrack.connection_check.probes.base import ConnectivityProbe


class CustomEndpointProbe(ConnectivityProbe):
    """Check that a self-hosted endpoint URL parses; no request is sent.

    There is no generic way to call an arbitrary custom API, so only the
    endpoint's shape is verified.
    """

    def __init__(
        self,
        service: ServiceName,
        config: LLMConfig | TranscriptionConfig | EmbeddingsConfig,
        timeout: float,
    ) -> None:
        """Initialize probe for the given service."""
        super().__init__(timeout)
        self.service = service
        self.config = config

    def secrets(self) -> list[str]:
        """Return the API key, if any."""
        return [self.config.api_key]

    async def probe(self) -> ProbeOutcome:
        """Parse the endpoint URL."""
        endpoint = (self.config.custom_endpoint or "").strip()
        if not endpoint:
            return ProbeOutcome.failure(
                "Custom endpoint is required for custom provider"
            )

        try:
            parsed = urlparse(endpoint)
            hostname = parsed.hostname
        except ValueError:
            hostname = None
            parsed = None

        if parsed is None or parsed.scheme not in {"http", "https"} or not hostname:
            return ProbeOutcome.failure("Invalid custom endpoint URL format")

        return ProbeOutcome(
            success=True,
            message=f"Custom {self.service} endpoint format is valid",
            details={"host": hostname, "probed": False},
        )


class UnsupportedProviderProbe(ConnectivityProbe):
    """Report that no live test exists for a provider."""

    def __init__(self, service: ServiceName, provider: str) -> None:
        """Initialize probe for the given service and provider."""
        super().__init__(timeout=1.0)
        self.service = service
        self.provider = provider

    async def probe(self) -> ProbeOutcome:
        """Fail without any network call."""
        return ProbeOutcome.failure(
            f"{self.provider} provider testing is not supported",
            error_type="format",
            provider=self.provider,
        )
