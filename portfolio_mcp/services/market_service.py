"""Market sentiment history and news."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Any, Callable

from portfolio_mcp.portfolio.fixtures import market_news
from portfolio_mcp.portfolio.models import MarketNewsItem, MarketSentiment
from portfolio_mcp.portfolio.repository import InMemorySentimentRepository
from portfolio_mcp.services.ai_service import AIService
from portfolio_mcp.services.base import ServiceResult, local_result, not_found


def _record_day(record: MarketSentiment) -> date | None:
    try:
        return datetime.fromisoformat(record.date).date()
    except ValueError:
        return None


class MarketService:
    def __init__(
        self,
        sentiment: InMemorySentimentRepository,
        ai: AIService,
        today: Callable[[], date] | None = None,
    ) -> None:
        self.sentiment = sentiment
        self.ai = ai
        self._today = today or (lambda: datetime.now(timezone.utc).date())

    def get_market_sentiment(self) -> ServiceResult[MarketSentiment]:
        latest = self.sentiment.latest()
        if latest is None:
            return not_found("No market sentiment recorded.")
        return local_result(latest)

    def get_market_sentiment_history(self, days: int = 7, include_ai: bool = True) -> ServiceResult[dict[str, Any]]:
        """History in ascending date order; today's entry adopts the AI analysis score."""
        if days < 1:
            raise ValueError("days must be at least 1.")
        history = self.sentiment.history(days)
        payload: dict[str, Any] = {"history": history, "analysis": None}
        if not include_ai:
            return local_result(payload)
        analysis = self.ai.get_market_sentiment_analysis()
        if analysis.data is not None:
            score = analysis.data.get("sentiment_score")
            today = self._today()
            payload["history"] = [
                replace(record, sentiment_score=float(score))
                if _record_day(record) == today and isinstance(score, (int, float))
                else record
                for record in history
            ]
            payload["analysis"] = analysis.data
        return ServiceResult(
            data=payload,
            source=analysis.source or "local",
            warning=analysis.warning,
            fetched_at=analysis.fetched_at,
            data_provider=analysis.data_provider or "local",
        )

    def get_market_news(self) -> ServiceResult[list[MarketNewsItem]]:
        return local_result(market_news(), source="static")
