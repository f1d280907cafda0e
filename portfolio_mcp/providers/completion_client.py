"""Chat-completion clients for the external language-model endpoint."""

from __future__ import annotations

from typing import Any

from portfolio_mcp.providers.http import ProviderError, post_json
from portfolio_mcp.providers.models import JSON_ONLY_INSTRUCTION, AISettings


class OpenRouterClient:
    """OpenAI-compatible chat-completions endpoint (OpenRouter by default)."""

    provider = "openrouter"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://openrouter.ai/api/v1/chat/completions",
        timeout_seconds: float | None = None,
        app_title: str = "Portfolio AI",
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.app_title = app_title

    def complete(self, prompt: str, system: str = JSON_ONLY_INSTRUCTION, max_tokens: int = 2000) -> str | None:
        if not self.api_key:
            raise ProviderError("openrouter", "AUTH", "OpenRouter API key is not configured.")
        payload: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": 0.2,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "X-Title": self.app_title,
        }
        data = post_json(
            self.base_url,
            payload,
            provider="openrouter",
            label="OpenRouter",
            headers=headers,
            timeout_seconds=self.timeout_seconds,
        )
        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list) or not choices:
            return None
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        return content.strip() if isinstance(content, str) and content.strip() else None


class AnthropicClient:
    """Anthropic messages endpoint."""

    provider = "anthropic"

    def __init__(self, api_key: str, model: str, timeout_seconds: float | None = None) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.base_url = "https://api.anthropic.com/v1/messages"

    def complete(self, prompt: str, system: str = JSON_ONLY_INSTRUCTION, max_tokens: int = 2000) -> str | None:
        if not self.api_key:
            raise ProviderError("anthropic", "AUTH", "Anthropic API key is not configured.")
        payload: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": 0.2,
            "system": system,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": "2023-06-01",
            "content-type": "application/json",
        }
        data = post_json(
            self.base_url,
            payload,
            provider="anthropic",
            label="Anthropic",
            headers=headers,
            timeout_seconds=self.timeout_seconds,
        )
        content = data.get("content") if isinstance(data, dict) else None
        if not isinstance(content, list):
            return None
        texts = [item.get("text") for item in content if isinstance(item, dict) and isinstance(item.get("text"), str)]
        return "\n".join(texts).strip() if texts else None


CompletionClient = OpenRouterClient | AnthropicClient


def build_completion_client(
    ai_settings: AISettings,
    timeout_seconds: float | None = None,
    openrouter_base_url: str = "https://openrouter.ai/api/v1/chat/completions",
) -> CompletionClient:
    if ai_settings.provider == "anthropic":
        return AnthropicClient(ai_settings.api_key, ai_settings.model, timeout_seconds)
    return OpenRouterClient(
        ai_settings.api_key,
        ai_settings.model,
        base_url=openrouter_base_url,
        timeout_seconds=timeout_seconds,
    )
