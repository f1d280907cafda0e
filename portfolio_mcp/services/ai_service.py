"""AI-backed suggestion, analysis, rebalance and sentiment orchestration.

Every operation builds a prompt, asks the completion endpoint, normalizes the
answer and reconciles it with the catalog. A static placeholder is always the
last attempt, so a result carries data even when every provider fails.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Callable

from portfolio_mcp.portfolio.allocation import validate_allocation_request, validate_strategy
from portfolio_mcp.portfolio.models import ANALYSIS_TYPES, AllocationRequest, Portfolio, RebalanceRow
from portfolio_mcp.portfolio.normalizer import UnparsableAIResponse, normalize_ai_response
from portfolio_mcp.portfolio.placeholders import (
    analysis_placeholder,
    market_sentiment_placeholder,
    suggestion_placeholder,
)
from portfolio_mcp.portfolio.reconciler import coerce_suggestions, compute_portfolio_metrics, reconcile
from portfolio_mcp.portfolio.repository import AssetCatalog, PortfolioRepository
from portfolio_mcp.prompts.ai_prompts import (
    build_analysis_prompt,
    build_market_sentiment_prompt,
    build_rebalance_prompt,
    build_suggestion_prompt,
)
from portfolio_mcp.providers.completion_client import CompletionClient
from portfolio_mcp.providers.models import RiskProfileFeed
from portfolio_mcp.providers.risk_profile import RiskProfileClient
from portfolio_mcp.services.base import ServiceContext, ServiceResult, local_result, not_found, run_with_cache
from portfolio_mcp.services.fallback_manager import PLACEHOLDER_KEY, FallbackManager, ProviderAttempt
from portfolio_mcp.services.provider_status import ProviderStatus

LOGGER = logging.getLogger(__name__)
PROVIDER_LABELS = {"openrouter": "OpenRouter", "anthropic": "Anthropic"}
REBALANCE_EXPECTED_RETURN = "Based on rebalanced allocation"

CompletionFactory = Callable[..., CompletionClient | None]


def strategy_label(strategy: str, risk_level: int | None) -> str:
    if strategy == "risk_level":
        return f"DRC Level {risk_level}"
    if strategy == "sharpe_ratio":
        return "Optimized for Sharpe Ratio"
    return "AI Recommended"


def rebalance_action(current: float, target: float) -> str:
    delta = round(target - current, 2)
    if delta > 0:
        return f"Increase by {delta:g}%"
    if delta < 0:
        return f"Reduce by {abs(delta):g}%"
    return "No change"


def _total_warning(total: float) -> str | None:
    if abs(total - 100.0) > 0.01:
        return f"Suggested allocations sum to {total:g}, not 100."
    return None


def _text(value: Any, default: str = "") -> str:
    return value.strip() if isinstance(value, str) and value.strip() else default


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


class AIService:
    def __init__(
        self,
        ctx: ServiceContext,
        catalog: AssetCatalog,
        portfolios: PortfolioRepository,
        completion_factory: CompletionFactory,
    ) -> None:
        self.ctx = ctx
        self.catalog = catalog
        self.portfolios = portfolios
        self.completion_factory = completion_factory
        status = self.ctx.get_provider("provider_status")
        if not isinstance(status, ProviderStatus):
            status = ProviderStatus()
            self.ctx.providers["provider_status"] = status
        self.fallback_manager = FallbackManager(provider_status=status)

    def _risk_profile(self) -> RiskProfileClient | None:
        client = self.ctx.get_provider("riskprofile")
        return client if isinstance(client, RiskProfileClient) else None

    def _feed(self, risk_level: int) -> RiskProfileFeed | None:
        client = self._risk_profile()
        if client is None:
            return None
        return run_with_cache(self.ctx, f"riskprofile:{risk_level}", lambda: client.get_profile(risk_level))

    def _completion_attempt(
        self,
        client: CompletionClient | None,
        call: Callable[[CompletionClient], Any],
    ) -> list[ProviderAttempt[Any]]:
        if client is None:
            return []
        return [ProviderAttempt(client.provider, PROVIDER_LABELS.get(client.provider, client.provider), lambda: call(client))]

    @staticmethod
    def _ask(client: CompletionClient, prompt: str) -> dict[str, Any] | list[Any] | None:
        text = client.complete(prompt)
        if text is None:
            return None
        return normalize_ai_response(text)

    # Suggestions

    def _suggestion_payload(
        self,
        raw: dict[str, Any],
        request: AllocationRequest,
        warnings: list[str],
        overrides: dict[str, float | None] | None = None,
    ) -> dict[str, Any]:
        suggestions = coerce_suggestions(raw.get("suggestions"))
        if not suggestions:
            raise UnparsableAIResponse("AI response has no usable suggestions.")
        holdings = reconcile(suggestions, self.catalog.index())
        metrics = compute_portfolio_metrics(holdings, overrides)
        notes = list(warnings)
        total_warning = _total_warning(metrics.allocation_total)
        if total_warning:
            notes.append(total_warning)
        return {
            "suggestions": [asdict(item) for item in suggestions],
            "holdings": holdings,
            "metrics": metrics,
            "analysis": _text(raw.get("analysis")),
            "expected_return": _text(raw.get("expected_return"), "N/A"),
            "risk_assessment": _text(raw.get("risk_assessment"), strategy_label(request.optimization_strategy, request.risk_level)),
            "request": asdict(request),
            "warnings": notes,
        }

    def _suggestion_from_completion(
        self, client: CompletionClient, request: AllocationRequest, warnings: list[str]
    ) -> dict[str, Any] | None:
        parsed = self._ask(client, build_suggestion_prompt(request))
        if parsed is None:
            return None
        raw = parsed if isinstance(parsed, dict) else {"suggestions": parsed}
        return self._suggestion_payload(raw, request, warnings)

    def _suggestion_from_feed(self, request: AllocationRequest, warnings: list[str]) -> dict[str, Any] | None:
        feed = self._feed(request.risk_level or 0)
        if feed is None:
            return None
        raw = {
            "suggestions": [asdict(item) for item in feed.allocations],
            "analysis": f"Allocation published by the risk profile feed for DRC level {feed.risk_level}.",
            "expected_return": f"{feed.expected_return:g}%" if feed.expected_return is not None else "N/A",
            "risk_assessment": strategy_label("risk_level", feed.risk_level),
        }
        return self._suggestion_payload(raw, request, warnings, {"risk_score": feed.risk_score})

    def get_portfolio_suggestion(self, request: AllocationRequest) -> ServiceResult[dict[str, Any]]:
        request, warnings = validate_allocation_request(request)
        client = self.completion_factory()
        attempts: list[ProviderAttempt[dict[str, Any]]] = []
        if request.optimization_strategy == "risk_level":
            attempts.append(
                ProviderAttempt("riskprofile", "Risk profile feed", lambda: self._suggestion_from_feed(request, warnings))
            )
        attempts.extend(self._completion_attempt(client, lambda c: self._suggestion_from_completion(c, request, warnings)))
        attempts.append(
            ProviderAttempt(
                PLACEHOLDER_KEY,
                "Placeholder",
                lambda: self._suggestion_payload(
                    suggestion_placeholder(
                        request.stocks_percentage,
                        request.bonds_percentage,
                        request.alternatives_percentage,
                        request.risk_level,
                    ),
                    request,
                    warnings,
                ),
            )
        )
        subject = f"{request.stocks_percentage:g}/{request.bonds_percentage:g}/{request.alternatives_percentage:g}"
        return self.fallback_manager.execute("get_portfolio_suggestion", subject, attempts)

    # Analysis

    @staticmethod
    def _analysis_from_completion(client: CompletionClient, portfolio: Portfolio, analysis_type: str) -> dict[str, Any] | None:
        parsed = AIService._ask(client, build_analysis_prompt(portfolio, analysis_type))
        if parsed is None:
            return None
        if not isinstance(parsed, dict) or not _text(parsed.get("summary")):
            raise UnparsableAIResponse("AI analysis has no summary.")
        payload = dict(parsed)
        payload["summary"] = _text(parsed.get("summary"))
        payload["recommendations"] = _string_list(parsed.get("recommendations"))
        return payload

    def get_portfolio_analysis(self, portfolio_id: int, analysis_type: str) -> ServiceResult[dict[str, Any]]:
        portfolio = self.portfolios.get(portfolio_id)
        if portfolio is None:
            return not_found(f"Portfolio {portfolio_id} not found.")
        if analysis_type not in ANALYSIS_TYPES:
            LOGGER.info("analysis type not supported: portfolio_id=%s type=%s", portfolio_id, analysis_type)
            return local_result(analysis_placeholder(analysis_type), source="placeholder")
        client = self.completion_factory()
        attempts = self._completion_attempt(client, lambda c: self._analysis_from_completion(c, portfolio, analysis_type))
        attempts.append(ProviderAttempt(PLACEHOLDER_KEY, "Placeholder", lambda: analysis_placeholder(analysis_type)))
        return self.fallback_manager.execute("get_portfolio_analysis", f"{portfolio_id}:{analysis_type}", attempts)

    # Rebalance

    def _rebalance_payload(
        self,
        portfolio: Portfolio,
        targets: dict[str, float],
        request: AllocationRequest,
        summary: str,
        recommendations: list[str],
        expected_return: str = REBALANCE_EXPECTED_RETURN,
        overrides: dict[str, float | None] | None = None,
    ) -> dict[str, Any]:
        current: dict[str, float] = {}
        names: dict[str, str] = {}
        types: dict[str, str] = {}
        for holding in portfolio.holdings:
            current[holding.ticker] = current.get(holding.ticker, 0.0) + holding.allocation
            names.setdefault(holding.ticker, holding.name)
            types.setdefault(holding.ticker, holding.type)
        rows: list[RebalanceRow] = []
        for ticker, value in current.items():
            target = round(targets.get(ticker, value), 2)
            rows.append(
                RebalanceRow(ticker=ticker, current=value, target=target, action=rebalance_action(value, target), name=names[ticker])
            )
        total_warning = _total_warning(sum(row.target for row in rows))
        warnings = [total_warning] if total_warning else []
        return {
            "portfolio_id": portfolio.id,
            "summary": summary,
            "recommendations": recommendations,
            "current_vs_target": rows,
            "suggestions": [
                {"ticker": row.ticker, "name": row.name, "allocation": row.target, "type": types.get(row.ticker) or "ETF"}
                for row in rows
            ],
            "analysis": summary,
            "expected_return": expected_return,
            "risk_assessment": strategy_label(request.optimization_strategy, request.risk_level),
            "metrics_overrides": {key: value for key, value in (overrides or {}).items() if value is not None},
            "warnings": warnings,
        }

    def _rebalance_from_feed(self, portfolio: Portfolio, request: AllocationRequest) -> dict[str, Any] | None:
        feed = self._feed(request.risk_level or 0)
        if feed is None:
            return None
        held = {holding.ticker for holding in portfolio.holdings}
        matched = {item.ticker: item.allocation for item in feed.allocations if item.ticker in held}
        matched_total = sum(matched.values())
        if not matched or matched_total <= 0:
            LOGGER.info("risk profile feed shares no holdings: portfolio_id=%s level=%s", portfolio.id, feed.risk_level)
            return None
        targets = {ticker: 0.0 for ticker in held}
        targets.update({ticker: value * 100.0 / matched_total for ticker, value in matched.items()})
        return self._rebalance_payload(
            portfolio,
            targets,
            request,
            summary=f"Holdings redistributed to the risk profile feed allocation for DRC level {feed.risk_level}.",
            recommendations=["Holdings absent from the risk profile are reduced to zero."]
            if len(matched) < len(held)
            else [],
            expected_return=f"{feed.expected_return:g}%" if feed.expected_return is not None else REBALANCE_EXPECTED_RETURN,
            overrides={"risk_score": feed.risk_score},
        )

    def _rebalance_from_completion(
        self, client: CompletionClient, portfolio: Portfolio, request: AllocationRequest
    ) -> dict[str, Any] | None:
        parsed = self._ask(client, build_rebalance_prompt(portfolio, request))
        if parsed is None:
            return None
        raw = parsed if isinstance(parsed, dict) else {"current_vs_target": parsed}
        held = {holding.ticker for holding in portfolio.holdings}
        rows = coerce_suggestions(raw.get("current_vs_target"), allocation_key="target")
        introduced = [row.ticker for row in rows if row.ticker not in held]
        if introduced:
            LOGGER.info("rebalance answer introduced new tickers, dropped: tickers=%s", ",".join(introduced))
        targets = {row.ticker: row.allocation for row in rows if row.ticker in held}
        if not targets:
            raise UnparsableAIResponse("AI rebalance has no targets for existing holdings.")
        return self._rebalance_payload(
            portfolio,
            targets,
            request,
            summary=_text(raw.get("summary")),
            recommendations=_string_list(raw.get("recommendations")),
        )

    def _rebalance_placeholder(self, portfolio: Portfolio, request: AllocationRequest) -> dict[str, Any]:
        canned = analysis_placeholder("rebalance")
        return self._rebalance_payload(
            portfolio,
            {},
            request,
            summary=canned["summary"],
            recommendations=canned["recommendations"],
        )

    def rebalance_portfolio(
        self,
        portfolio_id: int,
        optimization_strategy: str = "ai_recommended",
        risk_level: int | None = None,
    ) -> ServiceResult[dict[str, Any]]:
        level = validate_strategy(optimization_strategy, risk_level)
        portfolio = self.portfolios.get(portfolio_id)
        if portfolio is None:
            return not_found(f"Portfolio {portfolio_id} not found.")
        request = AllocationRequest(0, 0, 0, optimization_strategy=optimization_strategy, risk_level=level)
        client = self.completion_factory()
        attempts: list[ProviderAttempt[dict[str, Any]]] = []
        if optimization_strategy == "risk_level":
            attempts.append(
                ProviderAttempt("riskprofile", "Risk profile feed", lambda: self._rebalance_from_feed(portfolio, request))
            )
        attempts.extend(self._completion_attempt(client, lambda c: self._rebalance_from_completion(c, portfolio, request)))
        attempts.append(ProviderAttempt(PLACEHOLDER_KEY, "Placeholder", lambda: self._rebalance_placeholder(portfolio, request)))
        return self.fallback_manager.execute("rebalance_portfolio", str(portfolio_id), attempts)

    # Market sentiment

    @staticmethod
    def _sentiment_from_completion(client: CompletionClient) -> dict[str, Any] | None:
        parsed = AIService._ask(client, build_market_sentiment_prompt())
        if parsed is None:
            return None
        score = parsed.get("sentiment_score") if isinstance(parsed, dict) else None
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise UnparsableAIResponse("AI sentiment has no numeric sentiment_score.")
        payload = dict(parsed)
        payload["sentiment_score"] = max(-1.0, min(1.0, float(score)))
        payload["investment_implications"] = _string_list(parsed.get("investment_implications"))
        return payload

    def get_market_sentiment_analysis(self) -> ServiceResult[dict[str, Any]]:
        client = self.completion_factory()
        attempts = self._completion_attempt(client, self._sentiment_from_completion)
        attempts.append(ProviderAttempt(PLACEHOLDER_KEY, "Placeholder", market_sentiment_placeholder))
        return self.fallback_manager.execute("get_market_sentiment_analysis", "market", attempts)
