"""Natural-language prompt builders for the completion endpoint."""

from __future__ import annotations

from portfolio_mcp.portfolio.models import AllocationRequest, CombinedAsset, Portfolio

REPORT_SYSTEM_INSTRUCTION = (
    "Analyze the portfolio document and answer with a professional financial analysis. "
    "Format the answer in markdown with sections and tables."
)
DEFAULT_REPORT_PROMPT = (
    "Comment on the composition of the portfolio and its asset allocation in light of the current macroeconomic "
    "context. The commentary is addressed to financial advisors presenting the portfolio to their clients, so also "
    "cover drawdown against a benchmark, diversification and a comparison of risk/return indicators."
)

_STRATEGY_TEXT = {
    "risk_level": "match risk tier {risk_level} on a 1 (conservative) to 5 (aggressive) scale",
    "sharpe_ratio": "maximize the risk-adjusted return (Sharpe ratio)",
    "ai_recommended": "follow your own best recommendation",
}

_ANALYSIS_FOCUS = {
    "performance": "recent performance, best and worst performers and their contribution",
    "risk": "risk factors, exposures and their impact",
    "allocation": "the current allocation by category against a benchmark",
    "rebalance": "drift from target and the trades needed to rebalance",
}


def _strategy_sentence(request: AllocationRequest) -> str:
    template = _STRATEGY_TEXT.get(request.optimization_strategy, _STRATEGY_TEXT["ai_recommended"])
    return template.format(risk_level=request.risk_level)


def _holdings_lines(holdings: list[CombinedAsset]) -> str:
    if not holdings:
        return "- (no holdings)"
    return "\n".join(f"- {item.ticker} ({item.name}): {item.allocation:g}%" for item in holdings)


def build_suggestion_prompt(request: AllocationRequest) -> str:
    lines = [
        "Build an ETF portfolio with this coarse allocation:",
        f"- Stocks: {request.stocks_percentage:g}%",
        f"- Bonds: {request.bonds_percentage:g}%",
        f"- Alternatives: {request.alternatives_percentage:g}%",
        f"Optimization goal: {_strategy_sentence(request)}.",
    ]
    if request.suggested_assets:
        tickers = ", ".join(asset.ticker for asset in request.suggested_assets)
        lines.append(f"Prefer these instruments where suitable: {tickers}.")
    lines.append(
        'Return JSON with keys "suggestions" (list of {"ticker", "name", "allocation", "type"} whose allocations '
        'sum to 100), "analysis", "expected_return" and "risk_assessment".'
    )
    return "\n".join(lines)


def build_analysis_prompt(portfolio: Portfolio, analysis_type: str) -> str:
    focus = _ANALYSIS_FOCUS.get(analysis_type, analysis_type)
    return (
        f"Analyze the portfolio '{portfolio.name}' focusing on {focus}.\n"
        f"Holdings:\n{_holdings_lines(portfolio.holdings)}\n"
        'Return JSON with at least "summary" (string) and "recommendations" (list of strings), plus any '
        "structured detail relevant to the analysis type."
    )


def build_rebalance_prompt(portfolio: Portfolio, request: AllocationRequest) -> str:
    return (
        f"Rebalance the portfolio '{portfolio.name}' using only its existing holdings.\n"
        f"Current holdings:\n{_holdings_lines(portfolio.holdings)}\n"
        f"Optimization goal: {_strategy_sentence(request)}.\n"
        'Return JSON with "summary", "recommendations" and "current_vs_target" (list of {"ticker", "name", '
        '"current", "target", "action"}); targets must sum to 100 and must not introduce new tickers.'
    )


def build_market_sentiment_prompt() -> str:
    return (
        "Assess the current overall market sentiment.\n"
        'Return JSON with "overall_sentiment" (label), "sentiment_score" (number from -1 to 1), '
        '"key_factors" (list of {"factor", "sentiment", "details"}), "sector_outlook" (list of '
        '{"sector", "outlook", "details"}) and "investment_implications" (list of strings).'
    )


def build_report_prompt(document_text: str, instructions: str | None = None) -> str:
    request = (instructions or DEFAULT_REPORT_PROMPT).strip()
    return f"{request}\n\nPortfolio document:\n{document_text}"
