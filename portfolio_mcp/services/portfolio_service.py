"""Portfolio and asset catalog operations."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from portfolio_mcp.portfolio.fixtures import DEFAULT_USER_ID
from portfolio_mcp.portfolio.models import AllocationRequest, CatalogAsset, Portfolio
from portfolio_mcp.portfolio.reconciler import coerce_suggestions, compute_portfolio_metrics, reconcile
from portfolio_mcp.portfolio.repository import AssetCatalog, PortfolioRepository
from portfolio_mcp.services.ai_service import AIService
from portfolio_mcp.services.base import ServiceResult, local_result, not_found

LOGGER = logging.getLogger(__name__)


class PortfolioService:
    def __init__(self, portfolios: PortfolioRepository, catalog: AssetCatalog, ai: AIService) -> None:
        self.portfolios = portfolios
        self.catalog = catalog
        self.ai = ai

    def list_portfolios(self) -> ServiceResult[list[Portfolio]]:
        return local_result(self.portfolios.list())

    def get_portfolio(self, portfolio_id: int) -> ServiceResult[Portfolio]:
        portfolio = self.portfolios.get(portfolio_id)
        if portfolio is None:
            return not_found(f"Portfolio {portfolio_id} not found.")
        return local_result(portfolio)

    def create_portfolio(self, name: str, description: str | None = None) -> ServiceResult[Portfolio]:
        clean = name.strip()
        if not clean:
            raise ValueError("name must not be empty.")
        portfolio = Portfolio(
            id=self.portfolios.next_id(),
            name=clean,
            created_at=datetime.now(timezone.utc).isoformat(),
            user_id=DEFAULT_USER_ID,
            description=description,
            holdings=[],
            metrics=compute_portfolio_metrics([]),
        )
        self.portfolios.upsert(portfolio)
        LOGGER.info("portfolio created: id=%s name=%s", portfolio.id, portfolio.name)
        return local_result(portfolio)

    def create_ai_portfolio(self, request: AllocationRequest) -> ServiceResult[Portfolio]:
        """Ask for a suggestion and persist it as a new AI-generated portfolio."""
        suggestion = self.ai.get_portfolio_suggestion(request)
        if suggestion.data is None:
            return ServiceResult(data=None, error=suggestion.error)
        payload = suggestion.data
        effective = payload["request"]
        now = datetime.now(timezone.utc)
        risk = f"risk level {effective['risk_level']}" if effective["risk_level"] is not None else effective["optimization_strategy"]
        portfolio = Portfolio(
            id=self.portfolios.next_id(),
            name=f"AI Portfolio {now.date().isoformat()}",
            created_at=now.isoformat(),
            user_id=DEFAULT_USER_ID,
            description=(
                f"AI-generated portfolio based on {effective['stocks_percentage']:g}% stocks, "
                f"{effective['bonds_percentage']:g}% bonds, {effective['alternatives_percentage']:g}% alternatives "
                f"with {risk}"
            ),
            is_ai_generated=True,
            holdings=payload["holdings"],
            metrics=payload["metrics"],
        )
        self.portfolios.upsert(portfolio)
        LOGGER.info("ai portfolio created: id=%s source=%s holdings=%s", portfolio.id, suggestion.source, len(portfolio.holdings))
        return ServiceResult(
            data=portfolio,
            source=suggestion.source,
            warning=suggestion.warning,
            fetched_at=suggestion.fetched_at,
            data_provider=suggestion.data_provider,
        )

    def apply_rebalance(
        self,
        portfolio_id: int,
        suggestions: list[dict[str, Any]],
        metrics_overrides: dict[str, float | None] | None = None,
    ) -> ServiceResult[Portfolio]:
        """Replace holdings with the given allocations and recompute metrics from scratch."""
        portfolio = self.portfolios.get(portfolio_id)
        if portfolio is None:
            return not_found(f"Portfolio {portfolio_id} not found.")
        rows = coerce_suggestions(suggestions)
        if not rows:
            raise ValueError("suggestions must contain at least one {ticker, allocation} row.")
        holdings = reconcile(rows, self.catalog.index())
        updated = replace(portfolio, holdings=holdings, metrics=compute_portfolio_metrics(holdings, metrics_overrides))
        self.portfolios.upsert(updated)
        LOGGER.info(
            "rebalance applied: portfolio_id=%s holdings=%s allocation_total=%s",
            portfolio_id,
            len(holdings),
            updated.metrics.allocation_total if updated.metrics else None,
        )
        return local_result(updated)

    def list_assets(self) -> ServiceResult[list[CatalogAsset]]:
        return local_result(self.catalog.list())

    def get_asset(self, asset_id: int | None = None, ticker: str | None = None) -> ServiceResult[CatalogAsset]:
        if asset_id is None and not ticker:
            raise ValueError("Provide asset_id or ticker.")
        asset = self.catalog.get(asset_id) if asset_id is not None else self.catalog.find(ticker or "")
        if asset is None:
            return not_found(f"Asset {asset_id if asset_id is not None else ticker} not found.")
        return local_result(asset)
