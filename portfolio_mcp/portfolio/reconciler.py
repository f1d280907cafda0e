"""Merge externally suggested allocations with the asset catalog and recompute summary metrics."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Mapping

from portfolio_mcp.portfolio.models import (
    PLACEHOLDER_METRIC_FIELDS,
    CatalogAsset,
    CombinedAsset,
    PortfolioMetrics,
    SuggestedAsset,
)

LOGGER = logging.getLogger(__name__)
UNKNOWN_TYPE = "unknown"
OVERRIDABLE_FIELDS = {"return_1y", "return_3y", *PLACEHOLDER_METRIC_FIELDS}


def build_catalog_index(catalog: Iterable[CatalogAsset]) -> dict[str, CatalogAsset]:
    """Index catalog records by ticker and ISIN; the first record wins on collisions."""
    index: dict[str, CatalogAsset] = {}
    for asset in catalog:
        index.setdefault(asset.ticker, asset)
        if asset.isin:
            index.setdefault(asset.isin, asset)
    return index


def _as_percent(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = re.search(r"-?\d+(?:\.\d+)?", value)
        return float(match.group(0)) if match else None
    return None


def coerce_suggestions(items: Any, allocation_key: str = "allocation") -> list[SuggestedAsset]:
    """Validate untrusted suggestion rows; rows without a ticker or a numeric allocation are dropped."""
    if not isinstance(items, list):
        return []
    suggestions: list[SuggestedAsset] = []
    dropped = 0
    for item in items:
        if not isinstance(item, dict):
            dropped += 1
            continue
        ticker = item.get("ticker") or item.get("isin")
        allocation = _as_percent(item.get(allocation_key))
        if not isinstance(ticker, str) or not ticker.strip() or allocation is None or allocation < 0:
            dropped += 1
            continue
        name = item.get("name")
        kind = item.get("type")
        suggestions.append(
            SuggestedAsset(
                ticker=ticker.strip(),
                allocation=allocation,
                name=name if isinstance(name, str) else None,
                type=kind if isinstance(kind, str) else None,
            )
        )
    if dropped:
        LOGGER.info("suggestion rows dropped by validation: count=%s", dropped)
    return suggestions


def combine(suggestion: SuggestedAsset, asset: CatalogAsset | None) -> CombinedAsset:
    allocation = float(suggestion.allocation)
    if asset is None:
        return CombinedAsset(
            ticker=suggestion.ticker,
            name=suggestion.ticker,
            type=UNKNOWN_TYPE,
            allocation=allocation,
            catalog_match=False,
        )
    metrics = asset.metrics
    return CombinedAsset(
        ticker=asset.ticker,
        name=asset.name,
        type=asset.type,
        allocation=allocation,
        catalog_match=True,
        asset_id=asset.id,
        isin=asset.isin,
        sector=asset.sector,
        region=asset.region,
        price=metrics.price if metrics else None,
        return_1y=metrics.return_1y if metrics else None,
        return_3y=metrics.return_3y if metrics else None,
        volatility_3y=metrics.volatility_3y if metrics else None,
        sharpe_3y=metrics.sharpe_3y if metrics else None,
        dividend_yield=metrics.dividend_yield if metrics else None,
        expense_ratio=metrics.expense_ratio if metrics else None,
        risk_score=metrics.risk_score if metrics else None,
    )


def reconcile(suggestions: Iterable[SuggestedAsset], catalog: Mapping[str, CatalogAsset]) -> list[CombinedAsset]:
    """Join suggestions with the catalog by exact identifier.

    Input order is preserved and duplicate identifiers produce duplicate rows.
    """
    combined = [combine(suggestion, catalog.get(suggestion.ticker)) for suggestion in suggestions]
    unmatched = [item.ticker for item in combined if not item.catalog_match]
    if unmatched:
        LOGGER.info("suggestions without catalog match: tickers=%s", ",".join(unmatched))
    return combined


def allocation_total(holdings: Iterable[CombinedAsset]) -> float:
    return sum(float(holding.allocation) for holding in holdings)


def _weighted(holdings: list[CombinedAsset], field_name: str) -> float:
    total = 0.0
    for holding in holdings:
        value = getattr(holding, field_name)
        if isinstance(value, (int, float)):
            total += (holding.allocation / 100.0) * value
    return total


def compute_portfolio_metrics(
    holdings: Iterable[CombinedAsset],
    overrides: Mapping[str, float | None] | None = None,
) -> PortfolioMetrics:
    """Recompute summary metrics from scratch.

    Only the 1y/3y returns are derived from holdings. The remaining summary
    fields stay `None` and are listed in `not_computed` unless an override
    supplies them. Overrides replace the recomputed value outright.
    """
    rows = list(holdings)
    metrics = PortfolioMetrics(
        return_1y=_weighted(rows, "return_1y"),
        return_3y=_weighted(rows, "return_3y"),
        asset_count=len(rows),
        allocation_total=allocation_total(rows),
        not_computed=list(PLACEHOLDER_METRIC_FIELDS),
    )
    for name, value in (overrides or {}).items():
        if value is None:
            continue
        if name not in OVERRIDABLE_FIELDS:
            LOGGER.warning("ignored unknown metrics override: field=%s", name)
            continue
        setattr(metrics, name, float(value))
        if name in metrics.not_computed:
            metrics.not_computed.remove(name)
    return metrics
