"""Static payloads returned when no completion provider produced a usable answer."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

ANALYSIS_NOT_AVAILABLE = "Analysis not available for the requested type."

# (ticker, name, bucket, share of bucket)
_SUGGESTION_MIX: dict[str, list[tuple[str, str, str, float]]] = {
    "low": [
        ("VTI", "Vanguard Total Stock Market ETF", "stocks", 0.4),
        ("VEA", "Vanguard FTSE Developed Markets ETF", "stocks", 0.3),
        ("VWO", "Vanguard FTSE Emerging Markets ETF", "stocks", 0.3),
        ("BND", "Vanguard Total Bond Market ETF", "bonds", 0.7),
        ("BNDX", "Vanguard Total International Bond ETF", "bonds", 0.3),
        ("GLD", "SPDR Gold Shares", "alternatives", 0.5),
        ("VNQ", "Vanguard Real Estate ETF", "alternatives", 0.5),
    ],
    "medium": [
        ("VTI", "Vanguard Total Stock Market ETF", "stocks", 0.5),
        ("VGT", "Vanguard Information Technology ETF", "stocks", 0.2),
        ("VEA", "Vanguard FTSE Developed Markets ETF", "stocks", 0.2),
        ("VWO", "Vanguard FTSE Emerging Markets ETF", "stocks", 0.1),
        ("BND", "Vanguard Total Bond Market ETF", "bonds", 0.6),
        ("BNDX", "Vanguard Total International Bond ETF", "bonds", 0.4),
        ("GLD", "SPDR Gold Shares", "alternatives", 0.3),
        ("VNQ", "Vanguard Real Estate ETF", "alternatives", 0.7),
    ],
    "high": [
        ("VTI", "Vanguard Total Stock Market ETF", "stocks", 0.3),
        ("VGT", "Vanguard Information Technology ETF", "stocks", 0.3),
        ("VHT", "Vanguard Health Care ETF", "stocks", 0.1),
        ("VWO", "Vanguard FTSE Emerging Markets ETF", "stocks", 0.3),
        ("BND", "Vanguard Total Bond Market ETF", "bonds", 0.5),
        ("BNDX", "Vanguard Total International Bond ETF", "bonds", 0.5),
        ("GLD", "SPDR Gold Shares", "alternatives", 0.2),
        ("VNQ", "Vanguard Real Estate ETF", "alternatives", 0.5),
        ("ICLN", "iShares Global Clean Energy ETF", "alternatives", 0.3),
    ],
}

_EXPECTED_RETURN = {"low": "5-7%", "medium": "7-9%", "high": "9-12%"}

_ANALYSES: dict[str, dict[str, Any]] = {
    "performance": {
        "summary": "Your portfolio has outperformed the S&P 500 by 2.3% over the past year, with technology and "
        "healthcare sectors contributing most to the gains.",
        "best_performers": [
            {"ticker": "VGT", "name": "Vanguard Information Technology ETF", "return_1y": 28.4, "contribution": 5.2},
            {"ticker": "VHT", "name": "Vanguard Health Care ETF", "return_1y": 18.7, "contribution": 3.1},
        ],
        "worst_performers": [
            {"ticker": "BND", "name": "Vanguard Total Bond Market ETF", "return_1y": -3.1, "contribution": -0.8},
            {"ticker": "VNQ", "name": "Vanguard Real Estate ETF", "return_1y": 1.2, "contribution": 0.2},
        ],
        "recommendations": [
            "Consider increasing allocation to technology sector given strong performance trends",
            "Review bond holdings as interest rate environment may continue to pressure returns",
            "Maintain diversification across sectors to manage risk",
        ],
    },
    "risk": {
        "summary": "Your portfolio has a moderate risk profile with a volatility of 12.5%, which is slightly below "
        "the market average of 14.2%.",
        "risk_factors": [
            {
                "factor": "Market Risk",
                "exposure": "Medium",
                "impact": "Your portfolio has a beta of 0.92, indicating slightly lower market risk than the S&P 500.",
            },
            {
                "factor": "Sector Concentration",
                "exposure": "Medium-High",
                "impact": "Technology sector represents 32% of your portfolio, which increases sector-specific risk.",
            },
            {
                "factor": "Geographic Exposure",
                "exposure": "Medium",
                "impact": "Your portfolio has 75% US exposure, which limits international diversification.",
            },
        ],
        "recommendations": [
            "Consider increasing international exposure to improve geographic diversification",
            "Review technology sector allocation to ensure it aligns with your risk tolerance",
            "Add uncorrelated assets to further reduce portfolio volatility",
        ],
    },
    "allocation": {
        "summary": "Your current asset allocation is 65% stocks, 25% bonds, and 10% alternatives, which is "
        "appropriate for a growth-oriented investor with a moderate risk tolerance.",
        "current_allocation": [
            {"category": "US Stocks", "allocation": 45, "benchmark": 40, "difference": 5},
            {"category": "International Stocks", "allocation": 20, "benchmark": 25, "difference": -5},
            {"category": "US Bonds", "allocation": 15, "benchmark": 15, "difference": 0},
            {"category": "International Bonds", "allocation": 10, "benchmark": 10, "difference": 0},
            {"category": "Real Estate", "allocation": 5, "benchmark": 5, "difference": 0},
            {"category": "Commodities", "allocation": 5, "benchmark": 5, "difference": 0},
        ],
        "recommendations": [
            "Consider increasing international stock exposure to align with benchmark",
            "Maintain current bond allocation as it aligns with your risk profile",
            "Review individual holdings within each asset class to ensure quality and fit",
        ],
    },
    "rebalance": {
        "summary": "Your portfolio has drifted from its target allocation due to market movements. A rebalance is "
        "recommended to maintain your desired risk profile.",
        "current_vs_target": [
            {"ticker": "VTI", "name": "Vanguard Total Stock Market ETF", "current": 35, "target": 30,
             "action": "Reduce by 5%"},
            {"ticker": "VEA", "name": "Vanguard FTSE Developed Markets ETF", "current": 15, "target": 20,
             "action": "Increase by 5%"},
            {"ticker": "BND", "name": "Vanguard Total Bond Market ETF", "current": 20, "target": 25,
             "action": "Increase by 5%"},
            {"ticker": "VGT", "name": "Vanguard Information Technology ETF", "current": 20, "target": 15,
             "action": "Reduce by 5%"},
            {"ticker": "GLD", "name": "SPDR Gold Shares", "current": 10, "target": 10, "action": "No change"},
        ],
        "recommendations": [
            "Rebalance to target allocation to maintain risk profile",
            "Consider tax implications when selling appreciated assets",
            "Use new contributions to adjust allocation without selling existing positions if possible",
        ],
    },
}

_MARKET_SENTIMENT: dict[str, Any] = {
    "overall_sentiment": "Moderately Positive",
    "sentiment_score": 0.65,
    "key_factors": [
        {"factor": "Economic Data", "sentiment": "Positive",
         "details": "Recent economic indicators show stronger than expected growth with controlled inflation."},
        {"factor": "Central Bank Policy", "sentiment": "Neutral",
         "details": "Central banks are maintaining current policies with potential for rate cuts later in the year."},
        {"factor": "Corporate Earnings", "sentiment": "Positive",
         "details": "Q1 earnings have largely exceeded expectations, particularly in technology and healthcare sectors."},
        {"factor": "Geopolitical Events", "sentiment": "Negative",
         "details": "Ongoing conflicts and trade tensions create uncertainty in specific regions and sectors."},
    ],
    "sector_outlook": [
        {"sector": "Technology", "outlook": "Positive",
         "details": "Strong earnings and AI developments continue to drive growth."},
        {"sector": "Healthcare", "outlook": "Positive",
         "details": "Innovation and demographic trends support continued expansion."},
        {"sector": "Financials", "outlook": "Neutral",
         "details": "Stable but facing pressure from potential rate changes."},
        {"sector": "Energy", "outlook": "Negative",
         "details": "Price volatility and transition pressures create headwinds."},
    ],
    "investment_implications": [
        "Consider maintaining or slightly increasing equity exposure given positive economic indicators",
        "Technology and healthcare sectors remain attractive for growth-oriented investors",
        "Fixed income may benefit from potential rate cuts later in the year",
        "Maintain diversification to manage geopolitical and sector-specific risks",
    ],
}


def risk_band(risk_level: int | None) -> str:
    """Map a 1-5 tier onto the low/medium/high placeholder mixes."""
    if risk_level is None:
        return "medium"
    if risk_level <= 2:
        return "low"
    if risk_level == 3:
        return "medium"
    return "high"


def suggestion_placeholder(
    stocks_percentage: float,
    bonds_percentage: float,
    alternatives_percentage: float,
    risk_level: int | None,
) -> dict[str, Any]:
    band = risk_band(risk_level)
    buckets = {"stocks": stocks_percentage, "bonds": bonds_percentage, "alternatives": alternatives_percentage}
    suggestions = [
        {"ticker": ticker, "name": name, "allocation": round(buckets[bucket] * share, 2), "type": "ETF"}
        for ticker, name, bucket, share in _SUGGESTION_MIX[band]
    ]
    return {
        "suggestions": suggestions,
        "analysis": (
            f"Based on your allocation of {stocks_percentage:g}% stocks, {bonds_percentage:g}% bonds, and "
            f"{alternatives_percentage:g}% alternatives with a {band} risk profile, a diversified portfolio was "
            "built. This allocation balances growth potential with risk management appropriate for your preferences."
        ),
        "expected_return": _EXPECTED_RETURN[band],
        "risk_assessment": (
            f"This portfolio has a {band} risk profile with a volatility level that aligns with your risk tolerance."
        ),
    }


def analysis_placeholder(analysis_type: str) -> dict[str, Any]:
    payload = _ANALYSES.get(analysis_type)
    if payload is None:
        return {"summary": ANALYSIS_NOT_AVAILABLE, "recommendations": []}
    return deepcopy(payload)


def market_sentiment_placeholder() -> dict[str, Any]:
    return deepcopy(_MARKET_SENTIMENT)
