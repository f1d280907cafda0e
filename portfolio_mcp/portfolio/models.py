"""Typed portfolio models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Strategy = Literal["risk_level", "sharpe_ratio", "ai_recommended"]
Bucket = Literal["stocks", "bonds", "alternatives"]
AnalysisType = Literal["performance", "risk", "allocation", "rebalance"]

STRATEGIES = ("risk_level", "sharpe_ratio", "ai_recommended")
BUCKETS: tuple[Bucket, ...] = ("stocks", "bonds", "alternatives")
ANALYSIS_TYPES = ("performance", "risk", "allocation", "rebalance")
DEFAULT_RISK_LEVEL = 3

# Summary fields with no formula or data source behind them.
PLACEHOLDER_METRIC_FIELDS = ("volatility_3y", "sharpe_3y", "dividend_yield", "expense_ratio", "risk_score")


@dataclass
class SuggestedAsset:
    ticker: str
    allocation: float
    name: str | None = None
    type: str | None = None


@dataclass
class AllocationRequest:
    stocks_percentage: float
    bonds_percentage: float
    alternatives_percentage: float
    optimization_strategy: Strategy = "ai_recommended"
    risk_level: int | None = None
    suggested_assets: list[SuggestedAsset] = field(default_factory=list)

    def total(self) -> float:
        return self.stocks_percentage + self.bonds_percentage + self.alternatives_percentage


@dataclass
class AssetMetrics:
    price: float
    return_1y: float
    return_3y: float
    volatility_3y: float
    sharpe_3y: float
    dividend_yield: float
    expense_ratio: float
    risk_score: float


@dataclass
class CatalogAsset:
    id: int
    ticker: str
    name: str
    type: str
    isin: str | None = None
    sector: str | None = None
    region: str | None = None
    description: str | None = None
    metrics: AssetMetrics | None = None


@dataclass
class CombinedAsset:
    """A suggested holding joined with its catalog record.

    Numeric fields are `None` when the identifier has no catalog match; they are
    never filled with invented values.
    """

    ticker: str
    name: str
    type: str
    allocation: float
    catalog_match: bool
    asset_id: int | None = None
    isin: str | None = None
    sector: str | None = None
    region: str | None = None
    price: float | None = None
    return_1y: float | None = None
    return_3y: float | None = None
    volatility_3y: float | None = None
    sharpe_3y: float | None = None
    dividend_yield: float | None = None
    expense_ratio: float | None = None
    risk_score: float | None = None


@dataclass
class PortfolioMetrics:
    return_1y: float
    return_3y: float
    asset_count: int
    allocation_total: float
    volatility_3y: float | None = None
    sharpe_3y: float | None = None
    dividend_yield: float | None = None
    expense_ratio: float | None = None
    risk_score: float | None = None
    not_computed: list[str] = field(default_factory=list)


@dataclass
class Portfolio:
    id: int
    name: str
    created_at: str
    user_id: str
    description: str | None = None
    is_ai_generated: bool = False
    holdings: list[CombinedAsset] = field(default_factory=list)
    metrics: PortfolioMetrics | None = None


@dataclass
class RebalanceRow:
    ticker: str
    current: float
    target: float
    action: str
    name: str | None = None


@dataclass
class MarketSentiment:
    id: int
    date: str
    sentiment_score: float
    summary: str
    created_at: str


@dataclass
class MarketNewsItem:
    id: int
    title: str
    source: str
    url: str
    date: str
    sentiment: str | None = None
