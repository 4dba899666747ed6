"""Tests for service configuration models."""

import pytest
from pydantic import ValidationError

from studytrack.connection_check.models.service_config import (
    ConnectionTestConfig,
    EmbeddingsConfig,
    LLMConfig,
    NeonConfig,
    ProbeSettings,
    QdrantConfig,
    TranscriptionConfig,
)


def test_neon_config_accepts_camel_case() -> None:
    """NeonConfig accepts the wizard's connectionString key."""
    config = NeonConfig.model_validate({"connectionString": "postgresql://x"})
    assert config.connection_string == "postgresql://x"
    assert config.required is True


def test_qdrant_config_defaults() -> None:
    """QdrantConfig has no collection by default and is required."""
    config = QdrantConfig.model_validate(
        {"url": "https://q.qdrant.io", "apiKey": "key", "collectionName": "notes"}
    )
    assert config.api_key == "key"
    assert config.collection_name == "notes"
    assert config.required is True


def test_api_configs_required_defaults() -> None:
    """Only the LLM is required among the API services by default."""
    assert LLMConfig(provider="openai").required is True
    assert TranscriptionConfig(provider="openai").required is False
    assert EmbeddingsConfig(provider="openai").required is False


def test_api_config_defaults() -> None:
    """API configs carry the wizard's default models."""
    assert TranscriptionConfig(provider="openai").model == "whisper-1"
    assert EmbeddingsConfig(provider="openai").model == "text-embedding-ada-002"
    assert LLMConfig(provider="google").model is None
    assert LLMConfig(provider="google").api_key == ""


def test_llm_config_rejects_unknown_provider() -> None:
    """LLMConfig rejects providers outside the supported set."""
    with pytest.raises(ValidationError) as exc_info:
        LLMConfig(provider="mistral")  # type: ignore[arg-type]
    assert "provider" in str(exc_info.value)


def test_embeddings_config_accepts_sentence_transformers() -> None:
    """EmbeddingsConfig supports the sentence-transformers provider."""
    config = EmbeddingsConfig(provider="sentence-transformers")
    assert config.provider == "sentence-transformers"


def test_configs_are_immutable() -> None:
    """Service configs are replaced wholesale, never mutated."""
    config = NeonConfig(connection_string="postgresql://x")
    with pytest.raises(ValidationError):
        config.connection_string = "postgresql://y"  # type: ignore[misc]


def test_connection_test_config_get_and_secrets() -> None:
    """ConnectionTestConfig.get returns service configs and secret_values lists keys."""
    config = ConnectionTestConfig(
        neon=NeonConfig(connection_string="postgresql://u:p@h/db"),
        llm=LLMConfig(provider="openai", api_key="sk-test"),
        embeddings=EmbeddingsConfig(provider="sentence-transformers"),
    )

    assert config.get("neon") == config.neon
    assert config.get("qdrant") is None
    assert config.secret_values() == ["postgresql://u:p@h/db", "sk-test"]


def test_probe_settings_defaults() -> None:
    """ProbeSettings defaults to a five second timeout."""
    settings = ProbeSettings()
    assert settings.network_timeout == 5.0
    assert settings.db_connect_timeout == 5.0
    assert settings.openai_base_url == "https://api.openai.com/v1"


def test_probe_settings_rejects_non_positive_timeout() -> None:
    """ProbeSettings requires positive timeouts."""
    with pytest.raises(ValidationError):
        ProbeSettings(network_timeout=0)


def test_service_configs_strip_whitespace() -> None:
    """Service configs strip padding copied in from env files."""
    llm = LLMConfig.model_validate({"provider": "openai", "apiKey": " sk-test\n"})
    neon = NeonConfig(connection_string="postgresql://x\n")
    qdrant = QdrantConfig(url=" https://q.qdrant.io ", api_key="key\r\n")

    assert llm.api_key == "sk-test"
    assert neon.connection_string == "postgresql://x"
    assert qdrant.url == "https://q.qdrant.io"
    assert qdrant.api_key == "key"
