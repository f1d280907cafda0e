import pytest

from portfolio_mcp.portfolio.models import PLACEHOLDER_METRIC_FIELDS, AssetMetrics, CatalogAsset, SuggestedAsset
from portfolio_mcp.portfolio.reconciler import (
    build_catalog_index,
    coerce_suggestions,
    compute_portfolio_metrics,
    reconcile,
)


def _asset(asset_id: int, ticker: str, isin: str, return_1y: float, return_3y: float) -> CatalogAsset:
    return CatalogAsset(
        id=asset_id,
        ticker=ticker,
        name=f"{ticker} Fund",
        type="ETF",
        isin=isin,
        metrics=AssetMetrics(
            price=100.0,
            return_1y=return_1y,
            return_3y=return_3y,
            volatility_3y=12.0,
            sharpe_3y=0.8,
            dividend_yield=1.5,
            expense_ratio=0.05,
            risk_score=5.0,
        ),
    )


CATALOG = build_catalog_index(
    [
        _asset(1, "AAA", "US0000000001", 10.0, 20.0),
        _asset(2, "BBB", "US0000000002", -5.0, 2.0),
    ]
)


def test_matched_suggestion_carries_catalog_fields_and_suggested_allocation() -> None:
    [combined] = reconcile([SuggestedAsset("AAA", 25.0, name="ignored", type="Stock")], CATALOG)
    assert combined.catalog_match is True
    assert combined.name == "AAA Fund"
    assert combined.type == "ETF"
    assert combined.allocation == 25.0
    assert combined.return_1y == 10.0
    assert combined.asset_id == 1


def test_unknown_identifier_falls_back_to_identifier_only() -> None:
    [combined] = reconcile([SuggestedAsset("ZZZZ", 10.0, name="Mystery")], CATALOG)
    assert combined.catalog_match is False
    assert combined.name == "ZZZZ"
    assert combined.type == "unknown"
    assert combined.return_1y is None
    assert combined.price is None
    assert combined.risk_score is None


def test_lookup_by_isin_and_case_sensitivity() -> None:
    by_isin, lower = reconcile([SuggestedAsset("US0000000002", 50.0), SuggestedAsset("aaa", 50.0)], CATALOG)
    assert by_isin.ticker == "BBB"
    assert lower.catalog_match is False


def test_order_and_duplicates_are_preserved() -> None:
    rows = reconcile(
        [SuggestedAsset("BBB", 10.0), SuggestedAsset("AAA", 20.0), SuggestedAsset("BBB", 30.0)],
        CATALOG,
    )
    assert [(row.ticker, row.allocation) for row in rows] == [("BBB", 10.0), ("AAA", 20.0), ("BBB", 30.0)]


def test_reconcile_is_idempotent() -> None:
    suggestions = [SuggestedAsset("AAA", 60.0), SuggestedAsset("NOPE", 40.0)]
    assert reconcile(suggestions, CATALOG) == reconcile(suggestions, CATALOG)


def test_weighted_one_year_return() -> None:
    holdings = reconcile([SuggestedAsset("AAA", 60.0), SuggestedAsset("BBB", 40.0)], CATALOG)
    metrics = compute_portfolio_metrics(holdings)
    assert metrics.return_1y == pytest.approx(4.0)
    assert metrics.return_3y == pytest.approx(12.8)
    assert metrics.asset_count == 2
    assert metrics.allocation_total == 100.0


def test_unmatched_holdings_contribute_zero() -> None:
    holdings = reconcile([SuggestedAsset("AAA", 50.0), SuggestedAsset("NOPE", 50.0)], CATALOG)
    assert compute_portfolio_metrics(holdings).return_1y == pytest.approx(5.0)


def test_empty_holdings_yield_zero_metrics() -> None:
    metrics = compute_portfolio_metrics([])
    assert metrics.return_1y == 0.0
    assert metrics.return_3y == 0.0
    assert metrics.asset_count == 0
    assert metrics.allocation_total == 0.0


def test_placeholder_metrics_are_reported_as_not_computed() -> None:
    metrics = compute_portfolio_metrics(reconcile([SuggestedAsset("AAA", 100.0)], CATALOG))
    assert metrics.volatility_3y is None
    assert metrics.sharpe_3y is None
    assert metrics.not_computed == list(PLACEHOLDER_METRIC_FIELDS)


def test_overrides_replace_fields_and_clear_not_computed() -> None:
    holdings = reconcile([SuggestedAsset("AAA", 100.0)], CATALOG)
    metrics = compute_portfolio_metrics(holdings, {"risk_score": 3.2, "return_1y": 7.0, "bogus": 1.0, "sharpe_3y": None})
    assert metrics.risk_score == 3.2
    assert metrics.return_1y == 7.0
    assert "risk_score" not in metrics.not_computed
    assert "sharpe_3y" in metrics.not_computed


def test_allocation_total_is_reported_not_enforced() -> None:
    holdings = reconcile([SuggestedAsset("AAA", 70.0), SuggestedAsset("BBB", 50.0)], CATALOG)
    assert compute_portfolio_metrics(holdings).allocation_total == 120.0


def test_coerce_suggestions_drops_rows_without_ticker_or_allocation() -> None:
    rows = coerce_suggestions(
        [
            {"ticker": "AAA", "allocation": "35%", "name": "A"},
            {"ticker": "", "allocation": 10},
            {"ticker": "BBB"},
            {"isin": "US0000000002", "allocation": 15},
            "VTI 50%",
            {"ticker": "CCC", "allocation": True},
        ]
    )
    assert [(row.ticker, row.allocation, row.name) for row in rows] == [
        ("AAA", 35.0, "A"),
        ("US0000000002", 15.0, None),
    ]


def test_coerce_suggestions_ignores_non_lists() -> None:
    assert coerce_suggestions({"ticker": "AAA"}) == []
