"""AI suggestion, analysis and rebalance MCP tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from portfolio_mcp.portfolio.allocation import AllocationState, adjust_allocation
from portfolio_mcp.portfolio.models import AllocationRequest, SuggestedAsset
from portfolio_mcp.services.base import local_result
from portfolio_mcp.tools.common import respond

if TYPE_CHECKING:
    from portfolio_mcp.tools.registry import ToolServices


def _request(
    stocks_percentage: float,
    bonds_percentage: float,
    alternatives_percentage: float,
    optimization_strategy: str,
    risk_level: int | None,
    preferred_tickers: list[str] | None,
) -> AllocationRequest:
    return AllocationRequest(
        stocks_percentage=stocks_percentage,
        bonds_percentage=bonds_percentage,
        alternatives_percentage=alternatives_percentage,
        optimization_strategy=optimization_strategy,  # type: ignore[arg-type]
        risk_level=risk_level,
        suggested_assets=[SuggestedAsset(ticker=t.strip(), allocation=0.0) for t in preferred_tickers or [] if t.strip()],
    )


def register_ai_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(
        description=(
            "Suggest an ETF allocation for a stocks/bonds/alternatives split. optimization_strategy is one of "
            "risk_level, sharpe_ratio, ai_recommended; risk_level (1-5) defaults to 3 for the risk_level strategy."
        )
    )
    def get_portfolio_suggestion(
        stocks_percentage: float,
        bonds_percentage: float,
        alternatives_percentage: float,
        optimization_strategy: str = "ai_recommended",
        risk_level: int | None = None,
        preferred_tickers: list[str] | None = None,
    ) -> str:
        return respond(
            services,
            "get_portfolio_suggestion",
            lambda: services.ai.get_portfolio_suggestion(
                _request(
                    stocks_percentage,
                    bonds_percentage,
                    alternatives_percentage,
                    optimization_strategy,
                    risk_level,
                    preferred_tickers,
                )
            ),
            optimization_strategy,
        )

    @mcp.tool(description="Create and save a new AI-generated portfolio from a stocks/bonds/alternatives split.")
    def create_ai_portfolio(
        stocks_percentage: float,
        bonds_percentage: float,
        alternatives_percentage: float,
        optimization_strategy: str = "ai_recommended",
        risk_level: int | None = None,
        preferred_tickers: list[str] | None = None,
    ) -> str:
        return respond(
            services,
            "create_ai_portfolio",
            lambda: services.portfolio.create_ai_portfolio(
                _request(
                    stocks_percentage,
                    bonds_percentage,
                    alternatives_percentage,
                    optimization_strategy,
                    risk_level,
                    preferred_tickers,
                )
            ),
            optimization_strategy,
        )

    @mcp.tool(description="AI analysis of a portfolio. analysis_type: performance, risk, allocation or rebalance.")
    def get_portfolio_analysis(portfolio_id: int, analysis_type: str = "performance") -> str:
        return respond(
            services,
            "get_portfolio_analysis",
            lambda: services.ai.get_portfolio_analysis(portfolio_id, analysis_type),
            f"{portfolio_id}:{analysis_type}",
        )

    @mcp.tool(
        description=(
            "Propose new target weights for a portfolio's existing holdings. With optimization_strategy=risk_level "
            "the risk profile feed for the tier is tried before the AI model."
        )
    )
    def rebalance_portfolio(
        portfolio_id: int,
        optimization_strategy: str = "ai_recommended",
        risk_level: int | None = None,
    ) -> str:
        return respond(
            services,
            "rebalance_portfolio",
            lambda: services.ai.rebalance_portfolio(portfolio_id, optimization_strategy, risk_level),
            str(portfolio_id),
        )

    @mcp.tool(
        description=(
            "Set one bucket (stocks, bonds, alternatives) of a 100% split to an integer value and rescale the "
            "other two proportionally so the total stays 100."
        )
    )
    def adjust_allocation_split(stocks: int, bonds: int, alternatives: int, bucket: str, value: int) -> str:
        return respond(
            services,
            "adjust_allocation_split",
            lambda: local_result(adjust_allocation(AllocationState(stocks, bonds, alternatives), bucket, value)),
            bucket,
        )
