"""Tests for probe creation."""

import pytest
from conftest import ANTHROPIC_KEY, GEMINI_KEY, NEON_URL, OPENAI_KEY, QDRANT_KEY

from studytrack.connection_check.models.service_config import (
    EmbeddingsConfig,
    LLMConfig,
    NeonConfig,
    ProbeSettings,
    QdrantConfig,
    TranscriptionConfig,
)
from studytrack.connection_check.probes.anthropic import AnthropicProbe
from studytrack.connection_check.probes.custom import (
    CustomEndpointProbe,
    UnsupportedProviderProbe,
)
from studytrack.connection_check.probes.factory import create_probe, service_name
from studytrack.connection_check.probes.gemini import GeminiProbe
from studytrack.connection_check.probes.openai import (
    OpenAIChatProbe,
    OpenAIEmbeddingsProbe,
    OpenAIModelsProbe,
)
from studytrack.connection_check.probes.postgres import PostgresProbe
from studytrack.connection_check.probes.qdrant import QdrantProbe


@pytest.mark.parametrize(
    ("config", "probe_type"),
    [
        (NeonConfig(connection_string=NEON_URL), PostgresProbe),
        (QdrantConfig(url="https://x.qdrant.io", api_key=QDRANT_KEY), QdrantProbe),
        (
            TranscriptionConfig(provider="openai", api_key=OPENAI_KEY),
            OpenAIModelsProbe,
        ),
        (LLMConfig(provider="openai", api_key=OPENAI_KEY), OpenAIChatProbe),
        (LLMConfig(provider="google", api_key=GEMINI_KEY), GeminiProbe),
        (LLMConfig(provider="anthropic", api_key=ANTHROPIC_KEY), AnthropicProbe),
        (
            EmbeddingsConfig(provider="openai", api_key=OPENAI_KEY),
            OpenAIEmbeddingsProbe,
        ),
        (
            LLMConfig(provider="custom", custom_endpoint="https://x"),
            CustomEndpointProbe,
        ),
        (TranscriptionConfig(provider="google"), UnsupportedProviderProbe),
        (TranscriptionConfig(provider="azure"), UnsupportedProviderProbe),
        (EmbeddingsConfig(provider="sentence-transformers"), UnsupportedProviderProbe),
    ],
)
def test_create_probe_dispatch(config, probe_type) -> None:
    """create_probe picks the probe for the service and provider."""
    probe = create_probe(config, ProbeSettings())

    assert isinstance(probe, probe_type)
    assert probe.service == service_name(config)


def test_create_probe_applies_settings() -> None:
    """create_probe passes timeouts and base URLs from settings."""
    settings = ProbeSettings(
        network_timeout=2.0,
        db_connect_timeout=3.0,
        openai_base_url="http://localhost:9000/v1/",
    )

    neon = create_probe(NeonConfig(connection_string=NEON_URL), settings)
    chat = create_probe(LLMConfig(provider="openai", api_key=OPENAI_KEY), settings)

    assert isinstance(neon, PostgresProbe)
    assert neon.connect_timeout == 3.0
    assert neon.timeout == 5.0
    assert isinstance(chat, OpenAIChatProbe)
    assert chat.timeout == 2.0
    assert chat.base_url == "http://localhost:9000/v1"
