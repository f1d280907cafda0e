"""Portfolio resource definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from portfolio_mcp.runtime.response import result_response

if TYPE_CHECKING:
    from portfolio_mcp.tools.registry import ToolServices

PORTFOLIO_TEMPLATE_URI = "portfolio://{portfolio_id}"
CATALOG_URI = "catalog://assets"


def register_portfolio_resources(mcp: FastMCP, services: "ToolServices") -> None:
    @mcp.resource(
        CATALOG_URI,
        name="asset-catalog",
        title="Asset Catalog",
        description="Reference catalog of assets with static metrics, keyed by ticker and ISIN.",
        mime_type="application/json",
    )
    def asset_catalog() -> str:
        return result_response(services.portfolio.list_assets())

    @mcp.resource(
        PORTFOLIO_TEMPLATE_URI,
        name="portfolio",
        title="Portfolio By Id",
        description="One portfolio with holdings and recomputed metrics.",
        mime_type="application/json",
    )
    def portfolio_by_id(portfolio_id: str) -> str:
        try:
            numeric_id = int(portfolio_id)
        except ValueError as error:
            raise ValueError("portfolio_id must be an integer.") from error
        result = services.portfolio.get_portfolio(numeric_id)
        if result.data is None:
            raise ValueError(f"Portfolio resource not found: {portfolio_id}.")
        return result_response(result)
