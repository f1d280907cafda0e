"""Market sentiment and news MCP tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from portfolio_mcp.tools.common import respond

if TYPE_CHECKING:
    from portfolio_mcp.tools.registry import ToolServices


def register_market_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(description="Latest recorded market sentiment score (-1 to 1) and summary.")
    def get_market_sentiment() -> str:
        return respond(services, "get_market_sentiment", services.market.get_market_sentiment)

    @mcp.tool(
        description=(
            "Market sentiment history, oldest first. With include_ai=true today's entry takes the score of a "
            "fresh AI sentiment analysis, which is returned alongside."
        )
    )
    def get_market_sentiment_history(days: int = 7, include_ai: bool = True) -> str:
        return respond(
            services,
            "get_market_sentiment_history",
            lambda: services.market.get_market_sentiment_history(days, include_ai=include_ai),
            str(days),
        )

    @mcp.tool(description="AI market sentiment analysis: key factors, sector outlook and investment implications.")
    def get_market_sentiment_analysis() -> str:
        return respond(services, "get_market_sentiment_analysis", services.ai.get_market_sentiment_analysis)

    @mcp.tool(description="Latest market headlines.")
    def get_market_news() -> str:
        return respond(services, "get_market_news", services.market.get_market_news)
