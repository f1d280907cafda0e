"""Process settings read from the environment (and `.env`, when present)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from dotenv import load_dotenv

T = TypeVar("T")
LOGGER = logging.getLogger(__name__)

DEFAULT_OPENROUTER_MODEL = "google/gemini-2.0-flash-lite-preview-02-05:free"
DEFAULT_OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_AI_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".portfolio_mcp", "settings.json")
TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class Settings:
    """Everything the server reads at startup.

    `ai_provider`, `ai_model` and the API keys only seed the persisted AI
    settings; once `update_ai_settings` has written the settings file, the file
    wins.
    """

    app_name: str = "portfolio-ai"
    app_version: str = "1.0.0"
    transport_mode: str = "auto"
    http_transport: str = "sse"
    host: str = "0.0.0.0"
    port: int = 8000
    mcp_path: str = "/mcp"
    health_path: str = "/health"
    ai_provider: str = "openrouter"
    ai_model: str = DEFAULT_OPENROUTER_MODEL
    openrouter_api_key: str | None = None
    anthropic_api_key: str | None = None
    openrouter_base_url: str = DEFAULT_OPENROUTER_URL
    risk_profile_feed_url: str | None = None
    ai_settings_path: str = DEFAULT_AI_SETTINGS_PATH
    enable_ai: bool = True
    request_timeout_seconds: float = 30.0
    cache_ttl_seconds: int = 300
    log_level: str = "INFO"


def _env(name: str, default: T, parse: Callable[[str], T]) -> T:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return parse(raw)
    except ValueError:
        LOGGER.warning("ignoring invalid %s=%r, using %r", name, raw, default)
        return default


def _flag(raw: str) -> bool:
    return raw.lower() in TRUTHY


def _secret(*names: str) -> str | None:
    for name in names:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return None


def get_settings() -> Settings:
    load_dotenv()
    return Settings(
        transport_mode=_env("TRANSPORT_MODE", "auto", str.lower),
        http_transport=_env("HTTP_TRANSPORT", "sse", str.lower),
        host=_env("HOST", "0.0.0.0", str),
        port=_env("PORT", 8000, int),
        mcp_path=_env("MCP_PATH", "/mcp", str),
        health_path=_env("HEALTH_PATH", "/health", str),
        ai_provider=_env("AI_PROVIDER", "openrouter", str.lower),
        ai_model=_env("AI_MODEL", DEFAULT_OPENROUTER_MODEL, str),
        openrouter_api_key=_secret("OPENROUTER_API_KEY"),
        anthropic_api_key=_secret("ANTHROPIC_API_KEY", "CLAUDE_API_KEY"),
        openrouter_base_url=_env("OPENROUTER_BASE_URL", DEFAULT_OPENROUTER_URL, str),
        risk_profile_feed_url=_env("RISK_PROFILE_FEED_URL", None, str),
        ai_settings_path=_env("AI_SETTINGS_PATH", DEFAULT_AI_SETTINGS_PATH, os.path.expanduser),
        enable_ai=_env("ENABLE_AI", True, _flag),
        request_timeout_seconds=_env("REQUEST_TIMEOUT_SECONDS", 30.0, float),
        cache_ttl_seconds=_env("CACHE_TTL_SECONDS", 300, int),
        log_level=_env("LOG_LEVEL", "INFO", str.upper),
    )
