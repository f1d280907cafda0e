"""AI provider settings MCP tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from portfolio_mcp.services.base import local_result
from portfolio_mcp.tools.common import respond

if TYPE_CHECKING:
    from portfolio_mcp.tools.registry import ToolServices


def register_settings_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(description="Current AI provider and model; the API key is masked.")
    def get_ai_settings() -> str:
        return respond(services, "get_ai_settings", lambda: local_result(services.ai_settings.load().masked(), "settings"))

    @mcp.tool(
        description=(
            "Persist the AI provider (openrouter or anthropic), model and optionally the API key. "
            "Omitting api_key keeps the stored one while the provider is unchanged; "
            "switching provider without a key uses that provider's configured env key."
        )
    )
    def update_ai_settings(provider: str, model: str, api_key: str | None = None) -> str:
        return respond(
            services,
            "update_ai_settings",
            lambda: local_result(services.ai_settings.update(provider, model, api_key).masked(), "settings"),
            provider,
        )
