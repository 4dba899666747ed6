"""Anthropic connectivity probe."""

from studytrack.connection_check.models.outcome import ProbeOutcome
from studytrack.connection_check.models.service_config import LLMConfig
from studytrack.connection_check.probes.base import HttpProbe

DEFAULT_MODEL = "claude-3-haiku-20240307"
API_VERSION = "2023-06-01"


class AnthropicProbe(HttpProbe):
    """Minimal Messages API request with a one-token cap."""

    service = "llm"
    provider_label = "Anthropic API"

    def __init__(self, config: LLMConfig, base_url: str, timeout: float) -> None:
        """Initialize probe with the LLM configuration."""
        super().__init__(timeout)
        self.config = config
        self.base_url = base_url.rstrip("/")

    def secrets(self) -> list[str]:
        """Return the API key."""
        return [self.config.api_key]

    async def probe(self) -> ProbeOutcome:
        """Call ``POST /messages``."""
        headers = {
            "x-api-key": self.config.api_key,
            "anthropic-version": API_VERSION,
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.config.model or DEFAULT_MODEL,
            "max_tokens": 1,
            "messages": [{"role": "user", "content": "Test"}],
        }
        status, body, text = await self._request(
            "POST", f"{self.base_url}/messages", headers=headers, json=payload
        )
        return self._success_or_failure(
            status, body, text, "Anthropic API connection successful"
        )
