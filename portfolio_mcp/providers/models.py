"""Provider names and normalized payloads shared across providers and services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ProviderName = Literal["openrouter", "anthropic", "riskprofile", "pdf", "placeholder"]
CompletionProvider = Literal["openrouter", "anthropic"]
COMPLETION_PROVIDERS = ("openrouter", "anthropic")

JSON_ONLY_INSTRUCTION = (
    "You are a portfolio management assistant. "
    "Respond only with a single fenced ```json code block and no other text."
)


@dataclass
class AISettings:
    provider: str
    model: str
    api_key: str = ""

    def masked(self) -> dict[str, str]:
        key = self.api_key or ""
        hint = f"...{key[-4:]}" if len(key) > 8 else ("set" if key else "")
        return {"provider": self.provider, "model": self.model, "api_key": hint}


@dataclass
class RiskProfileAllocation:
    ticker: str
    allocation: float


@dataclass
class RiskProfileFeed:
    """Parsed body of the risk-profile endpoint for one tier."""

    risk_level: int
    allocations: list[RiskProfileAllocation] = field(default_factory=list)
    expected_return: float | None = None
    risk_score: float | None = None
