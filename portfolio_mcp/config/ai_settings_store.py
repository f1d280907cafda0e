"""Persistent AI provider settings.

Provider, model and credential are kept in a small JSON key-value file under a
single fixed key. Values are stored in clear text and never expire.
"""

from __future__ import annotations

import json
import logging
import os
from threading import Lock
from typing import Any

from portfolio_mcp.config.settings import Settings
from portfolio_mcp.providers.models import COMPLETION_PROVIDERS, AISettings

LOGGER = logging.getLogger(__name__)
AI_SETTINGS_KEY = "ai_settings"


class AISettingsStore:
    """Stored settings win over env defaults.

    A key is only ever paired with its own provider: with no stored key, the
    env key configured for the stored provider is used.
    """

    def __init__(self, path: str, defaults: AISettings, env_keys: dict[str, str] | None = None) -> None:
        self.path = path
        self.defaults = defaults
        self.env_keys = env_keys if env_keys is not None else {defaults.provider: defaults.api_key}
        self._lock = Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "AISettingsStore":
        env_keys = {
            "openrouter": settings.openrouter_api_key or "",
            "anthropic": settings.anthropic_api_key or "",
        }
        defaults = AISettings(
            provider=settings.ai_provider,
            model=settings.ai_model,
            api_key=env_keys.get(settings.ai_provider, ""),
        )
        return cls(settings.ai_settings_path, defaults, env_keys)

    def _read_all(self) -> dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as error:
            LOGGER.warning("ai settings unreadable, using defaults: path=%s error=%s", self.path, error)
            return {}
        return data if isinstance(data, dict) else {}

    def _stored(self) -> dict[str, Any]:
        with self._lock:
            stored = self._read_all().get(AI_SETTINGS_KEY)
        return stored if isinstance(stored, dict) else {}

    def load(self) -> AISettings:
        stored = self._stored()
        provider = str(stored.get("provider") or self.defaults.provider)
        return AISettings(
            provider=provider,
            model=str(stored.get("model") or self.defaults.model),
            api_key=str(stored.get("api_key") or self.env_keys.get(provider, "")),
        )

    def save(self, settings: AISettings) -> AISettings:
        provider = settings.provider.strip().lower()
        if provider not in COMPLETION_PROVIDERS:
            raise ValueError(f"provider must be one of: {', '.join(COMPLETION_PROVIDERS)}.")
        if not settings.model.strip():
            raise ValueError("model must not be empty.")
        clean = AISettings(provider=provider, model=settings.model.strip(), api_key=settings.api_key.strip())
        with self._lock:
            data = self._read_all()
            data[AI_SETTINGS_KEY] = {"provider": clean.provider, "model": clean.model, "api_key": clean.api_key}
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2)
        LOGGER.info("ai settings saved: provider=%s model=%s", clean.provider, clean.model)
        return clean

    def update(self, provider: str, model: str, api_key: str | None = None) -> AISettings:
        """Save provider and model; without `api_key` the stored key survives only if the provider is unchanged."""
        if api_key is None:
            stored = self._stored()
            same_provider = str(stored.get("provider") or self.defaults.provider) == provider.strip().lower()
            api_key = str(stored.get("api_key") or "") if same_provider else ""
            if not same_provider:
                LOGGER.info("ai provider changed without a key; stored key dropped: provider=%s", provider)
        self.save(AISettings(provider=provider, model=model, api_key=api_key))
        return self.load()
