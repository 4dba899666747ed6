"""Single dispatch point from a service configuration to its probe."""

from collections.abc import Callable

from studytrack.connection_check.models.service_config import (
    EmbeddingsConfig,
    LLMConfig,
    NeonConfig,
    ProbeSettings,
    QdrantConfig,
    ServiceConfig,
    ServiceName,
    TranscriptionConfig,
)
from studytrack.connection_check.probes.anthropic import AnthropicProbe
from studytrack.connection_check.probes.base import ConnectivityProbe
from studytrack.connection_check.probes.custom import (
    CustomEndpointProbe,
    UnsupportedProviderProbe,
)
from studytrack.connection_check.probes.gemini import GeminiProbe
from studytrack.connection_check.probes.openai import (
    OpenAIChatProbe,
    OpenAIEmbeddingsProbe,
    OpenAIModelsProbe,
)
from studytrack.connection_check.probes.postgres import PostgresProbe
from studytrack.connection_check.probes.qdrant import QdrantProbe

ApiConfig = TranscriptionConfig | LLMConfig | EmbeddingsConfig
ProbeBuilder = Callable[[ApiConfig, ProbeSettings], ConnectivityProbe]

API_PROBES: dict[tuple[ServiceName, str], ProbeBuilder] = {
    ("transcription", "openai"): lambda c, s: OpenAIModelsProbe(
        c, s.openai_base_url, s.network_timeout
    ),
    ("llm", "openai"): lambda c, s: OpenAIChatProbe(
        c, s.openai_base_url, s.network_timeout
    ),
    ("llm", "google"): lambda c, s: GeminiProbe(
        c, s.gemini_base_url, s.network_timeout  # type: ignore[arg-type]
    ),
    ("llm", "anthropic"): lambda c, s: AnthropicProbe(
        c, s.anthropic_base_url, s.network_timeout  # type: ignore[arg-type]
    ),
    ("embeddings", "openai"): lambda c, s: OpenAIEmbeddingsProbe(
        c, s.openai_base_url, s.network_timeout
    ),
}


def service_name(config: ServiceConfig) -> ServiceName:
    """Return the service a configuration belongs to."""
    names: dict[type, ServiceName] = {
        NeonConfig: "neon",
        QdrantConfig: "qdrant",
        TranscriptionConfig: "transcription",
        LLMConfig: "llm",
        EmbeddingsConfig: "embeddings",
    }
    return names[type(config)]


def create_probe(config: ServiceConfig, settings: ProbeSettings) -> ConnectivityProbe:
    """Create the connectivity probe for a service configuration."""
    if isinstance(config, NeonConfig):
        return PostgresProbe(
            config,
            connect_timeout=settings.db_connect_timeout,
            timeout=settings.db_connect_timeout + settings.network_timeout,
        )

    if isinstance(config, QdrantConfig):
        return QdrantProbe(config, settings.network_timeout)

    service = service_name(config)
    if config.provider == "custom":
        return CustomEndpointProbe(service, config, settings.network_timeout)

    builder = API_PROBES.get((service, config.provider))
    if builder is None:
        return UnsupportedProviderProbe(service, config.provider)
    return builder(config, settings)
