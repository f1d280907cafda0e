"""Seed data for the in-memory repositories."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

from portfolio_mcp.portfolio.models import AssetMetrics, CatalogAsset, MarketNewsItem, MarketSentiment, SuggestedAsset

DEFAULT_USER_ID = "user-123"

_CATALOG_ROWS = [
    {
        "ticker": "VTI",
        "name": "Vanguard Total Stock Market ETF",
        "isin": "US9229087690",
        "sector": "Broad Market",
        "region": "US",
        "description": "US Total Market Index",
        "metrics": AssetMetrics(
            price=268.41,
            return_1y=24.1,
            return_3y=28.7,
            volatility_3y=17.2,
            sharpe_3y=1.21,
            dividend_yield=1.36,
            expense_ratio=0.03,
            risk_score=5.8,
        ),
    },
    {
        "ticker": "VXUS",
        "name": "Vanguard Total International Stock ETF",
        "isin": "US9219097683",
        "sector": "Broad Market",
        "region": "International",
        "description": "International Stock Index",
        "metrics": AssetMetrics(
            price=61.12,
            return_1y=11.4,
            return_3y=7.9,
            volatility_3y=16.8,
            sharpe_3y=0.52,
            dividend_yield=3.21,
            expense_ratio=0.07,
            risk_score=6.1,
        ),
    },
    {
        "ticker": "BND",
        "name": "Vanguard Total Bond Market ETF",
        "isin": "US9219378356",
        "sector": "Bonds",
        "region": "US",
        "description": "US Bond Index",
        "metrics": AssetMetrics(
            price=72.35,
            return_1y=1.8,
            return_3y=-6.4,
            volatility_3y=7.1,
            sharpe_3y=-0.31,
            dividend_yield=3.52,
            expense_ratio=0.03,
            risk_score=2.4,
        ),
    },
    {
        "ticker": "BNDX",
        "name": "Vanguard Total International Bond ETF",
        "isin": "US92203J4076",
        "sector": "Bonds",
        "region": "International",
        "description": "International Bond Index",
        "metrics": AssetMetrics(
            price=49.02,
            return_1y=3.9,
            return_3y=-3.2,
            volatility_3y=5.9,
            sharpe_3y=-0.12,
            dividend_yield=4.02,
            expense_ratio=0.07,
            risk_score=2.1,
        ),
    },
    {
        "ticker": "VGT",
        "name": "Vanguard Information Technology ETF",
        "isin": "US92204A7028",
        "sector": "Technology",
        "region": "US",
        "description": "Technology Sector",
        "metrics": AssetMetrics(
            price=512.77,
            return_1y=33.6,
            return_3y=41.2,
            volatility_3y=24.9,
            sharpe_3y=1.38,
            dividend_yield=0.66,
            expense_ratio=0.10,
            risk_score=8.2,
        ),
    },
    {
        "ticker": "VHT",
        "name": "Vanguard Health Care ETF",
        "isin": "US92204A5048",
        "sector": "Healthcare",
        "region": "US",
        "description": "Healthcare Sector",
        "metrics": AssetMetrics(
            price=265.30,
            return_1y=8.7,
            return_3y=12.3,
            volatility_3y=14.6,
            sharpe_3y=0.61,
            dividend_yield=1.30,
            expense_ratio=0.10,
            risk_score=5.1,
        ),
    },
    {
        "ticker": "VDC",
        "name": "Vanguard Consumer Staples ETF",
        "isin": "US92204A2078",
        "sector": "Consumer Staples",
        "region": "US",
        "description": "Consumer Staples Sector",
        "metrics": AssetMetrics(
            price=201.44,
            return_1y=9.9,
            return_3y=15.1,
            volatility_3y=12.8,
            sharpe_3y=0.83,
            dividend_yield=2.47,
            expense_ratio=0.10,
            risk_score=4.2,
        ),
    },
    {
        "ticker": "VOX",
        "name": "Vanguard Communication Services ETF",
        "isin": "US92204A8844",
        "sector": "Communication",
        "region": "US",
        "description": "Communication Sector",
        "metrics": AssetMetrics(
            price=129.08,
            return_1y=27.3,
            return_3y=9.4,
            volatility_3y=22.4,
            sharpe_3y=0.41,
            dividend_yield=0.93,
            expense_ratio=0.10,
            risk_score=7.6,
        ),
    },
    {
        "ticker": "VCR",
        "name": "Vanguard Consumer Discretionary ETF",
        "isin": "US92204A1088",
        "sector": "Consumer Discretionary",
        "region": "US",
        "description": "Consumer Discretionary Sector",
        "metrics": AssetMetrics(
            price=318.56,
            return_1y=19.2,
            return_3y=6.8,
            volatility_3y=23.1,
            sharpe_3y=0.33,
            dividend_yield=0.81,
            expense_ratio=0.10,
            risk_score=7.4,
        ),
    },
    {
        "ticker": "VFH",
        "name": "Vanguard Financials ETF",
        "isin": "US92204A4058",
        "sector": "Financials",
        "region": "US",
        "description": "Financial Sector",
        "metrics": AssetMetrics(
            price=104.73,
            return_1y=29.8,
            return_3y=22.5,
            volatility_3y=20.3,
            sharpe_3y=0.97,
            dividend_yield=1.92,
            expense_ratio=0.10,
            risk_score=6.7,
        ),
    },
    {
        "ticker": "VEA",
        "name": "Vanguard FTSE Developed Markets ETF",
        "isin": "US9219438580",
        "sector": "Broad Market",
        "region": "International",
        "description": "Developed Markets ex-US Index",
        "metrics": AssetMetrics(
            price=50.21,
            return_1y=10.6,
            return_3y=8.8,
            volatility_3y=15.9,
            sharpe_3y=0.55,
            dividend_yield=3.18,
            expense_ratio=0.05,
            risk_score=5.9,
        ),
    },
    {
        "ticker": "VWO",
        "name": "Vanguard FTSE Emerging Markets ETF",
        "isin": "US9220428588",
        "sector": "Broad Market",
        "region": "Emerging",
        "description": "Emerging Markets Index",
        "metrics": AssetMetrics(
            price=44.87,
            return_1y=12.9,
            return_3y=-1.7,
            volatility_3y=18.2,
            sharpe_3y=0.08,
            dividend_yield=3.05,
            expense_ratio=0.08,
            risk_score=7.0,
        ),
    },
    {
        "ticker": "VNQ",
        "name": "Vanguard Real Estate ETF",
        "isin": "US9229085538",
        "sector": "Real Estate",
        "region": "US",
        "description": "US REIT Index",
        "metrics": AssetMetrics(
            price=88.19,
            return_1y=7.4,
            return_3y=-2.1,
            volatility_3y=21.7,
            sharpe_3y=-0.04,
            dividend_yield=3.96,
            expense_ratio=0.13,
            risk_score=6.6,
        ),
    },
    {
        "ticker": "GLD",
        "name": "SPDR Gold Shares",
        "isin": "US78463V1070",
        "sector": "Commodities",
        "region": "Global",
        "description": "Physical Gold",
        "metrics": AssetMetrics(
            price=243.60,
            return_1y=26.1,
            return_3y=13.8,
            volatility_3y=14.1,
            sharpe_3y=0.79,
            dividend_yield=0.0,
            expense_ratio=0.40,
            risk_score=5.3,
        ),
    },
    {
        "ticker": "ICLN",
        "name": "iShares Global Clean Energy ETF",
        "isin": "US4642882249",
        "sector": "Energy",
        "region": "Global",
        "description": "Clean Energy Equities",
        "metrics": AssetMetrics(
            price=13.92,
            return_1y=-12.4,
            return_3y=-38.9,
            volatility_3y=29.6,
            sharpe_3y=-0.82,
            dividend_yield=1.64,
            expense_ratio=0.41,
            risk_score=8.9,
        ),
    },
]

_PORTFOLIO_ROWS = [
    {
        "name": "test dragon",
        "created_at": "2025-05-05T19:02:00+00:00",
        "description": "Test portfolio with various ETFs",
        "is_ai_generated": False,
        "holdings": {"VTI": 40, "VGT": 25, "BND": 20, "VHT": 15},
    },
    {
        "name": "Capitolo test",
        "created_at": "2025-05-05T18:16:00+00:00",
        "description": "Balanced portfolio for medium risk",
        "is_ai_generated": False,
        "holdings": {"VTI": 35, "VXUS": 15, "BND": 30, "BNDX": 10, "GLD": 10},
    },
    {
        "name": "etfs test",
        "created_at": "2025-05-05T14:14:00+00:00",
        "description": "ETF-only portfolio",
        "is_ai_generated": False,
        "holdings": {"VTI": 50, "VXUS": 30, "BND": 20},
    },
    {
        "name": "tomapicci",
        "created_at": "2025-05-05T11:17:00+00:00",
        "description": "High growth portfolio",
        "is_ai_generated": False,
        "holdings": {"VGT": 35, "VCR": 20, "VOX": 20, "VFH": 15, "VWO": 10},
    },
    {
        "name": "top 10 etf dr",
        "created_at": "2025-05-05T14:35:00+00:00",
        "description": "Top 10 ETFs by performance",
        "is_ai_generated": True,
        "holdings": {"VGT": 20, "VFH": 15, "VOX": 15, "VTI": 15, "GLD": 10, "VCR": 10, "VHT": 8, "VDC": 7},
    },
    {
        "name": "top 10 funds UI",
        "created_at": "2025-01-25T17:30:00+00:00",
        "description": "Top 10 mutual funds",
        "is_ai_generated": True,
        "holdings": {"VTI": 30, "VEA": 20, "BND": 25, "VNQ": 10, "VDC": 15},
    },
]

# days before today, score, summary
_SENTIMENT_ROWS = [
    (
        0,
        0.7,
        "Markets are showing positive momentum with technology and healthcare sectors leading the gains. "
        "Inflation concerns are subsiding, and central banks are expected to maintain current interest rates.",
    ),
    (
        1,
        0.3,
        "Markets experienced volatility due to mixed economic data. Consumer discretionary and energy sectors "
        "underperformed, while defensive sectors showed resilience.",
    ),
    (
        2,
        0.5,
        "Markets closed flat as investors await key economic reports. International markets outperformed "
        "domestic ones, with emerging markets showing strength.",
    ),
]

_NEWS_ROWS = [
    ("Fed Signals Potential Rate Cut in Coming Months", "Financial Times", "positive"),
    ("Tech Stocks Rally on Strong Earnings Reports", "Wall Street Journal", "positive"),
    ("Oil Prices Drop Amid Supply Concerns", "Bloomberg", "negative"),
    ("European Markets Close Higher on Economic Data", "Reuters", "positive"),
]


def catalog_assets() -> list[CatalogAsset]:
    return [
        CatalogAsset(id=idx, type="ETF", **{**row, "metrics": replace(row["metrics"])})
        for idx, row in enumerate(_CATALOG_ROWS, start=1)
    ]


def portfolio_seeds() -> list[tuple[str, str, str, bool, list[SuggestedAsset]]]:
    return [
        (
            row["name"],
            row["created_at"],
            row["description"],
            row["is_ai_generated"],
            [SuggestedAsset(ticker=ticker, allocation=float(weight)) for ticker, weight in row["holdings"].items()],
        )
        for row in _PORTFOLIO_ROWS
    ]


def sentiment_history(now: datetime | None = None) -> list[MarketSentiment]:
    """Newest first, one record per day ending today."""
    current = now or datetime.now(timezone.utc)
    records: list[MarketSentiment] = []
    for idx, (days_ago, score, summary) in enumerate(_SENTIMENT_ROWS, start=1):
        stamp = (current - timedelta(days=days_ago)).isoformat()
        records.append(MarketSentiment(id=idx, date=stamp, sentiment_score=score, summary=summary, created_at=stamp))
    return records


def market_news(now: datetime | None = None) -> list[MarketNewsItem]:
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    return [
        MarketNewsItem(id=idx, title=title, source=source, url="#", date=stamp, sentiment=sentiment)
        for idx, (title, source, sentiment) in enumerate(_NEWS_ROWS, start=1)
    ]
