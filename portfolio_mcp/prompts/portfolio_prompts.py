"""Portfolio prompt definitions."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from portfolio_mcp.portfolio.models import STRATEGIES


def _build_portfolio_review_prompt(portfolio_id: str) -> str:
    clean = portfolio_id.strip()
    if not clean:
        raise ValueError("Missing required argument: portfolio_id.")
    return (
        "You are a portfolio assistant with access to the portfolio tools.\n"
        f"Review portfolio {clean}:\n"
        f"1) Call get_portfolio with portfolio_id={clean} and summarise holdings and metrics\n"
        "2) Call get_portfolio_analysis for the performance and risk types\n"
        "3) Point out metrics listed in not_computed instead of guessing them\n"
        "4) Finish with a short list of next steps."
    )


def _build_rebalance_plan_prompt(portfolio_id: str, strategy: str) -> str:
    clean = portfolio_id.strip()
    if not clean:
        raise ValueError("Missing required argument: portfolio_id.")
    if strategy not in STRATEGIES:
        raise ValueError(f"strategy must be one of: {', '.join(STRATEGIES)}.")
    return (
        f"Propose a rebalance for portfolio {clean} with optimization_strategy={strategy}.\n"
        "Call rebalance_portfolio, present the current_vs_target table, and ask for confirmation "
        "before calling apply_rebalance with the proposed targets."
    )


def register_portfolio_prompts(mcp: FastMCP) -> None:
    @mcp.prompt(
        name="portfolio_review",
        title="Portfolio Review Prompt",
        description="Walk through holdings, metrics and AI analysis for one portfolio.",
    )
    def portfolio_review(portfolio_id: str) -> str:
        return _build_portfolio_review_prompt(portfolio_id)

    @mcp.prompt(
        name="rebalance_plan",
        title="Rebalance Plan Prompt",
        description="Propose and confirm a rebalance for one portfolio.",
    )
    def rebalance_plan(portfolio_id: str, strategy: str = "ai_recommended") -> str:
        return _build_rebalance_plan_prompt(portfolio_id, strategy)
