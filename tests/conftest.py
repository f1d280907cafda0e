from __future__ import annotations

from typing import Callable

import pytest

from portfolio_mcp.cache.ttl_cache import TTLCache
from portfolio_mcp.config.ai_settings_store import AISettingsStore
from portfolio_mcp.providers.http import ProviderError
from portfolio_mcp.providers.models import AISettings, RiskProfileFeed
from portfolio_mcp.providers.risk_profile import RiskProfileClient
from portfolio_mcp.runtime.monitoring import ServerMetrics
from portfolio_mcp.services.base import ServiceContext
from portfolio_mcp.tools.registry import ToolServices, build_tool_services


class FakeCompletionClient:
    """Returns canned answers in order; an exception instance in the list is raised instead."""

    def __init__(self, answers: list[object], provider: str = "openrouter", model: str = "test-model") -> None:
        self.answers = list(answers)
        self.provider = provider
        self.model = model
        self.prompts: list[str] = []
        self.systems: list[str] = []

    def complete(self, prompt: str, system: str = "", max_tokens: int = 2000) -> str | None:
        self.prompts.append(prompt)
        self.systems.append(system)
        answer = self.answers.pop(0) if self.answers else None
        if isinstance(answer, Exception):
            raise answer
        return answer  # type: ignore[return-value]


class FakeRiskProfileClient(RiskProfileClient):
    def __init__(self, feed: RiskProfileFeed | None) -> None:
        super().__init__("https://feed.invalid/profile")
        self.feed = feed
        self.calls: list[int] = []

    def get_profile(self, risk_level: int) -> RiskProfileFeed | None:
        self.calls.append(risk_level)
        return self.feed


def rate_limited() -> ProviderError:
    return ProviderError("openrouter", "RATE_LIMIT", "OpenRouter rate limit reached.", 429)


@pytest.fixture
def settings_store(tmp_path) -> AISettingsStore:
    return AISettingsStore(str(tmp_path / "settings.json"), AISettings("openrouter", "test-model", "sk-or-test-1234"))


@pytest.fixture
def make_services(settings_store) -> Callable[..., ToolServices]:
    def _make(
        client: FakeCompletionClient | None = None,
        risk_profile: RiskProfileClient | None = None,
    ) -> ToolServices:
        ctx = ServiceContext(
            providers={"riskprofile": risk_profile},
            cache=TTLCache(default_ttl_seconds=60),
            cache_ttl_seconds=60,
            server_metrics=ServerMetrics(),
        )
        return build_tool_services(ctx, ai_settings=settings_store, completion_factory=lambda model=None: client)

    return _make
