"""Provider clients and normalized provider models."""

from portfolio_mcp.providers.completion_client import AnthropicClient, OpenRouterClient, build_completion_client
from portfolio_mcp.providers.http import ProviderError
from portfolio_mcp.providers.risk_profile import RiskProfileClient

__all__ = [
    "AnthropicClient",
    "OpenRouterClient",
    "ProviderError",
    "RiskProfileClient",
    "build_completion_client",
]
