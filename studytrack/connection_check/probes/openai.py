"""OpenAI connectivity probes for chat, transcription and embeddings."""

from studytrack.connection_check.models.outcome import ProbeOutcome
from studytrack.connection_check.models.service_config import (
    EmbeddingsConfig,
    LLMConfig,
    ServiceName,
    TranscriptionConfig,
)
from studytrack.connection_check.probes.base import HttpProbe

DEFAULT_CHAT_MODEL = "gpt-3.5-turbo"
DEFAULT_EMBEDDINGS_MODEL = "text-embedding-ada-002"


class _OpenAIProbe(HttpProbe):
    provider_label = "OpenAI"

    def __init__(
        self,
        config: LLMConfig | TranscriptionConfig | EmbeddingsConfig,
        base_url: str,
        timeout: float,
    ) -> None:
        super().__init__(timeout)
        self.config = config
        self.base_url = base_url.rstrip("/")

    def secrets(self) -> list[str]:
        return [self.config.api_key]

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }


class OpenAIChatProbe(_OpenAIProbe):
    """Minimal chat completion with a one-token cap."""

    service: ServiceName = "llm"

    async def probe(self) -> ProbeOutcome:
        """Call ``POST /chat/completions``."""
        payload = {
            "model": self.config.model or DEFAULT_CHAT_MODEL,
            "messages": [{"role": "user", "content": "Test"}],
            "max_tokens": 1,
        }
        status, body, text = await self._request(
            "POST",
            f"{self.base_url}/chat/completions",
            headers=self.headers,
            json=payload,
        )
        return self._success_or_failure(
            status, body, text, "OpenAI LLM API connection successful"
        )


class OpenAIModelsProbe(_OpenAIProbe):
    """List models; used for Whisper where a real upload is too costly."""

    service: ServiceName = "transcription"

    async def probe(self) -> ProbeOutcome:
        """Call ``GET /models``."""
        status, body, text = await self._request(
            "GET", f"{self.base_url}/models", headers=self.headers
        )
        return self._success_or_failure(
            status, body, text, "OpenAI Whisper API connection successful"
        )


class OpenAIEmbeddingsProbe(_OpenAIProbe):
    """Embed a single short string."""

    service: ServiceName = "embeddings"

    async def probe(self) -> ProbeOutcome:
        """Call ``POST /embeddings``."""
        payload = {
            "model": self.config.model or DEFAULT_EMBEDDINGS_MODEL,
            "input": "test",
        }
        status, body, text = await self._request(
            "POST", f"{self.base_url}/embeddings", headers=self.headers, json=payload
        )
        return self._success_or_failure(
            status, body, text, "OpenAI Embeddings API connection successful"
        )
