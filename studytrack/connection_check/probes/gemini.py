"""Google Gemini connectivity probe."""

from studytrack.connection_check.models.outcome import ProbeOutcome
from studytrack.connection_check.models.service_config import LLMConfig
from studytrack.connection_check.probes.base import HttpProbe

DEFAULT_MODEL = "gemini-1.5-flash"


class GeminiProbe(HttpProbe):
    """Minimal ``generateContent`` request with the key in the query string."""

    service = "llm"
    provider_label = "Google Gemini API"

    def __init__(self, config: LLMConfig, base_url: str, timeout: float) -> None:
        """Initialize probe with the LLM configuration."""
        super().__init__(timeout)
        self.config = config
        self.base_url = base_url.rstrip("/")

    def secrets(self) -> list[str]:
        """Return the API key."""
        return [self.config.api_key]

    async def probe(self) -> ProbeOutcome:
        """Call ``POST /models/{model}:generateContent``."""
        model = self.config.model or DEFAULT_MODEL
        url = f"{self.base_url}/models/{model}:generateContent"
        payload = {
            "contents": [{"parts": [{"text": "Test"}]}],
            "generationConfig": {"maxOutputTokens": 1},
        }
        status, body, text = await self._request(
            "POST",
            url,
            headers={"Content-Type": "application/json"},
            params={"key": self.config.api_key},
            json=payload,
        )
        return self._success_or_failure(
            status, body, text, "Google Gemini API connection successful"
        )
