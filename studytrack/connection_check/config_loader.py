"""Load connection test configuration from files and the environment."""

import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import ValidationError

from studytrack.connection_check.models.service_config import (
    ConnectionTestConfig,
    ProbeSettings,
)

BASE_URL_ENV_VARS = {
    "openai_base_url": "OPENAI_BASE_URL",
    "gemini_base_url": "GEMINI_BASE_URL",
    "anthropic_base_url": "ANTHROPIC_BASE_URL",
}


def load_connection_config(config_path: Path) -> ConnectionTestConfig:
    """Load a connection test configuration from a YAML or JSON file.

    The wizard's layout is accepted as well: services may be nested under
    ``database`` (neon, qdrant) and ``api`` (transcription, llm, embeddings).

    Args:
        config_path: Path to the configuration file

    Returns:
        Parsed configuration

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is invalid or doesn't match the schema

    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with config_path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        raise ValueError(f"Empty config file: {config_path}")

    if not isinstance(data, Mapping):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    return parse_connection_config(data, source=str(config_path))


def parse_connection_config(
    data: Mapping[str, object], source: str = "config"
) -> ConnectionTestConfig:
    """Validate a configuration mapping, flattening the wizard layout."""
    flattened: dict[str, object] = {}
    for section in ("database", "api"):
        nested = data.get(section)
        if isinstance(nested, Mapping):
            flattened.update(nested)
    flattened.update(
        {key: value for key, value in data.items() if key not in ("database", "api")}
    )

    try:
        return ConnectionTestConfig.model_validate(flattened)
    except ValidationError as e:
        # Input values are left out; they may be credentials
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors(include_input=False)
        )
        raise ValueError(
            f"Invalid connection config schema in {source}: {problems}"
        ) from e


def load_config_from_env(
    environ: Mapping[str, str] | None = None,
) -> ConnectionTestConfig:
    """Build a configuration from environment variables.

    Recognised variables: ``NEON_DATABASE_URL``, ``QDRANT_URL``,
    ``QDRANT_API_KEY``, ``QDRANT_COLLECTION``, ``LLM_PROVIDER``, ``LLM_MODEL``,
    ``OPENAI_API_KEY``, ``GOOGLE_GEMINI_API_KEY``, ``ANTHROPIC_API_KEY``.
    Services whose variables are missing are left unconfigured.
    """
    env = os.environ if environ is None else environ
    data: dict[str, object] = {}

    if env.get("NEON_DATABASE_URL"):
        data["neon"] = {"connection_string": env["NEON_DATABASE_URL"]}

    if env.get("QDRANT_URL") and env.get("QDRANT_API_KEY"):
        data["qdrant"] = {
            "url": env["QDRANT_URL"],
            "api_key": env["QDRANT_API_KEY"],
            "collection_name": env.get("QDRANT_COLLECTION") or None,
        }

    llm_keys = {
        "openai": env.get("OPENAI_API_KEY", ""),
        "google": env.get("GOOGLE_GEMINI_API_KEY", ""),
        "anthropic": env.get("ANTHROPIC_API_KEY", ""),
    }
    llm_provider = env.get("LLM_PROVIDER", "").lower()
    if not llm_provider:
        llm_provider = next(
            (name for name in ("google", "openai", "anthropic") if llm_keys[name]),
            "",
        )
    if llm_provider:
        data["llm"] = {
            "provider": llm_provider,
            "api_key": llm_keys.get(llm_provider, ""),
            "model": env.get("LLM_MODEL") or None,
        }

    if llm_keys["openai"]:
        data["transcription"] = {"provider": "openai", "api_key": llm_keys["openai"]}
        data["embeddings"] = {"provider": "openai", "api_key": llm_keys["openai"]}

    return parse_connection_config(data, source="environment")


def load_probe_settings(
    network_timeout: float | None = None,
    db_connect_timeout: float | None = None,
    environ: Mapping[str, str] | None = None,
) -> ProbeSettings:
    """Build probe settings from CLI options and base URL overrides."""
    env = os.environ if environ is None else environ
    values: dict[str, object] = {}
    if network_timeout is not None:
        values["network_timeout"] = network_timeout
    if db_connect_timeout is not None:
        values["db_connect_timeout"] = db_connect_timeout
    for field, var in BASE_URL_ENV_VARS.items():
        if env.get(var):
            values[field] = env[var]
    return ProbeSettings.model_validate(values)
