"""Portfolio and asset catalog MCP tools."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from portfolio_mcp.tools.common import respond

if TYPE_CHECKING:
    from portfolio_mcp.tools.registry import ToolServices


def register_portfolio_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(description="List all portfolios with holdings and summary metrics.")
    def list_portfolios() -> str:
        return respond(services, "list_portfolios", services.portfolio.list_portfolios)

    @mcp.tool(description="Get one portfolio by id with holdings and recomputed metrics.")
    def get_portfolio(portfolio_id: int) -> str:
        return respond(services, "get_portfolio", lambda: services.portfolio.get_portfolio(portfolio_id), str(portfolio_id))

    @mcp.tool(description="Create an empty portfolio.")
    def create_portfolio(name: str, description: str | None = None) -> str:
        return respond(services, "create_portfolio", lambda: services.portfolio.create_portfolio(name, description), name)

    @mcp.tool(description="List the reference asset catalog.")
    def list_assets() -> str:
        return respond(services, "list_assets", services.portfolio.list_assets)

    @mcp.tool(description="Get one catalog asset by numeric id or by exact ticker/ISIN.")
    def get_asset(asset_id: int | None = None, ticker: str | None = None) -> str:
        return respond(
            services,
            "get_asset",
            lambda: services.portfolio.get_asset(asset_id=asset_id, ticker=ticker),
            ticker or (str(asset_id) if asset_id is not None else None),
        )

    @mcp.tool(
        description=(
            "Replace a portfolio's holdings with the given [{ticker, allocation}] rows (for example the "
            "suggestions returned by rebalance_portfolio) and recompute its metrics."
        )
    )
    def apply_rebalance(
        portfolio_id: int,
        suggestions: list[dict[str, Any]],
        metrics_overrides: dict[str, float] | None = None,
    ) -> str:
        return respond(
            services,
            "apply_rebalance",
            lambda: services.portfolio.apply_rebalance(portfolio_id, suggestions, metrics_overrides),
            str(portfolio_id),
        )
