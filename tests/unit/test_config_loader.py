"""Tests for configuration loading."""

from pathlib import Path

import pytest
from conftest import GEMINI_KEY, NEON_URL, OPENAI_KEY, QDRANT_KEY, QDRANT_URL

from studytrack.connection_check.config_loader import (
    load_config_from_env,
    load_connection_config,
    load_probe_settings,
    parse_connection_config,
)
from studytrack.connection_check.models.service_config import LLMConfig


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Create a configuration file using the wizard's camelCase keys."""
    path = tmp_path / "connections.yaml"
    path.write_text(
        f"""
neon:
  connectionString: "{NEON_URL}"
qdrant:
  url: "{QDRANT_URL}"
  apiKey: "{QDRANT_KEY}"
  collectionName: notes
llm:
  provider: google
  apiKey: "{GEMINI_KEY}"
transcription:
  provider: openai
  apiKey: "{OPENAI_KEY}"
  required: true
"""
    )
    return path


def test_load_connection_config(config_file: Path) -> None:
    """load_connection_config parses every configured service."""
    config = load_connection_config(config_file)

    assert config.neon is not None
    assert config.neon.connection_string == NEON_URL
    assert config.qdrant is not None
    assert config.qdrant.collection_name == "notes"
    assert config.llm == LLMConfig(provider="google", api_key=GEMINI_KEY)
    assert config.transcription is not None
    assert config.transcription.required is True
    assert config.embeddings is None


def test_load_connection_config_wizard_layout(tmp_path: Path) -> None:
    """load_connection_config accepts database and api sections."""
    path = tmp_path / "wizard.json"
    path.write_text(
        '{"database": {"neon": {"connectionString": "postgresql://x"}},'
        ' "api": {"llm": {"provider": "openai", "apiKey": "sk-x"}}}'
    )

    config = load_connection_config(path)

    assert config.neon is not None
    assert config.llm is not None
    assert config.llm.provider == "openai"


def test_load_connection_config_missing_file(tmp_path: Path) -> None:
    """load_connection_config raises when the file is missing."""
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        load_connection_config(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("neon: [unclosed", "Invalid YAML"),
        ("", "Empty config file"),
        ("- neon\n- qdrant\n", "must contain a mapping"),
    ],
)
def test_load_connection_config_invalid_file(
    tmp_path: Path, content: str, expected: str
) -> None:
    """load_connection_config rejects malformed files."""
    path = tmp_path / "bad.yaml"
    path.write_text(content)

    with pytest.raises(ValueError, match=expected):
        load_connection_config(path)


def test_parse_connection_config_hides_values() -> None:
    """Schema errors name the field but never echo the value."""
    with pytest.raises(ValueError) as exc_info:
        parse_connection_config(
            {"llm": {"provider": "mistral", "apiKey": "sk-do-not-print"}}
        )

    message = str(exc_info.value)
    assert "Invalid connection config schema in config" in message
    assert "llm.provider" in message
    assert "sk-do-not-print" not in message


def test_load_config_from_env() -> None:
    """load_config_from_env maps environment variables to services."""
    config = load_config_from_env(
        {
            "NEON_DATABASE_URL": NEON_URL,
            "QDRANT_URL": QDRANT_URL,
            "QDRANT_API_KEY": QDRANT_KEY,
            "GOOGLE_GEMINI_API_KEY": GEMINI_KEY,
            "OPENAI_API_KEY": OPENAI_KEY,
        }
    )

    assert config.neon is not None
    assert config.qdrant is not None
    assert config.qdrant.collection_name is None
    assert config.llm is not None
    assert config.llm.provider == "google"
    assert config.llm.api_key == GEMINI_KEY
    assert config.transcription is not None
    assert config.transcription.api_key == OPENAI_KEY
    assert config.embeddings is not None


def test_load_config_from_env_explicit_provider() -> None:
    """LLM_PROVIDER and LLM_MODEL select the LLM."""
    config = load_config_from_env(
        {
            "LLM_PROVIDER": "OpenAI",
            "LLM_MODEL": "gpt-4o-mini",
            "OPENAI_API_KEY": OPENAI_KEY,
            "GOOGLE_GEMINI_API_KEY": GEMINI_KEY,
        }
    )

    assert config.llm == LLMConfig(
        provider="openai", api_key=OPENAI_KEY, model="gpt-4o-mini"
    )


def test_load_config_from_env_empty() -> None:
    """load_config_from_env leaves services without variables unconfigured."""
    config = load_config_from_env({"QDRANT_URL": QDRANT_URL})

    assert config.neon is None
    assert config.qdrant is None
    assert config.llm is None
    assert config.secret_values() == []


def test_load_probe_settings() -> None:
    """load_probe_settings combines options and base URL overrides."""
    settings = load_probe_settings(
        network_timeout=2.5,
        environ={"OPENAI_BASE_URL": "http://localhost:8080/v1"},
    )

    assert settings.network_timeout == 2.5
    assert settings.db_connect_timeout == 5.0
    assert settings.openai_base_url == "http://localhost:8080/v1"


def test_load_probe_settings_rejects_bad_timeout() -> None:
    """load_probe_settings rejects a non-positive timeout."""
    with pytest.raises(ValueError):
        load_probe_settings(network_timeout=-1, environ={})
