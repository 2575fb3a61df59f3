"""Shared sandbox configuration.

Reads ~/.phazur/configuration.json once per lookup so the executor, the
verification engine and the hosting application share one implementation.
A missing or unreadable file means "use defaults".
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_TOKENS = 500
DEFAULT_TEMPERATURE = 0.7
DEFAULT_LLM_TIMEOUT_SECONDS = 60.0
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
DEMO_HTTP_URL = "https://jsonplaceholder.typicode.com/posts/1"

# ---------------------------------------------------------------------------
# Low-level config file access
# ---------------------------------------------------------------------------

SANDBOX_CONFIG_FILE = Path.home() / ".phazur" / "configuration.json"


def get_sandbox_config() -> dict[str, Any]:
    """Load sandbox configuration from ~/.phazur/configuration.json."""
    if not SANDBOX_CONFIG_FILE.exists():
        return {}
    try:
        with open(SANDBOX_CONFIG_FILE, encoding="utf-8-sig") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


# ---------------------------------------------------------------------------
# Derived helpers
# ---------------------------------------------------------------------------


def get_preferred_model() -> str:
    """Return the default model for openai action nodes without an explicit model."""
    llm = get_sandbox_config().get("llm", {})
    return llm.get("model") or os.environ.get("PHAZUR_MODEL") or DEFAULT_MODEL


def get_max_tokens() -> int:
    """Return the configured max_tokens, falling back to DEFAULT_MAX_TOKENS."""
    return get_sandbox_config().get("llm", {}).get("max_tokens", DEFAULT_MAX_TOKENS)


def get_api_key() -> str | None:
    """Return the LLM API key.

    Uses the environment variable named by ``llm.api_key_env_var`` when the
    configuration file sets one, otherwise OPENAI_API_KEY.
    """
    llm = get_sandbox_config().get("llm", {})
    api_key_env_var = llm.get("api_key_env_var") or "OPENAI_API_KEY"
    return os.environ.get(api_key_env_var)


def _get_execution_setting(key: str, default: Any) -> Any:
    return get_sandbox_config().get("execution", {}).get(key, default)


# ---------------------------------------------------------------------------
# RuntimeConfig
# ---------------------------------------------------------------------------


@dataclass
class RuntimeConfig:
    """Sandbox runtime configuration loaded from ~/.phazur/configuration.json."""

    model: str = field(default_factory=get_preferred_model)
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = field(default_factory=get_max_tokens)
    api_key: str | None = field(default_factory=get_api_key)
    api_base: str | None = None
    llm_timeout_seconds: float = field(
        default_factory=lambda: _get_execution_setting(
            "llm_timeout_seconds", DEFAULT_LLM_TIMEOUT_SECONDS
        )
    )
    http_timeout_seconds: float = field(
        default_factory=lambda: _get_execution_setting(
            "http_timeout_seconds", DEFAULT_HTTP_TIMEOUT_SECONDS
        )
    )
    demo_url: str = DEMO_HTTP_URL
    branch_mode: str = field(
        default_factory=lambda: _get_execution_setting("branch_mode", "legacy")
    )
