"""Repository interfaces and in-memory implementations.

Each repository owns its records as instance state; nothing is shared at module
level. Lookups that miss return `None`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from copy import deepcopy
from threading import Lock
from typing import Iterable

from portfolio_mcp.portfolio import fixtures
from portfolio_mcp.portfolio.models import CatalogAsset, MarketSentiment, Portfolio
from portfolio_mcp.portfolio.reconciler import build_catalog_index, compute_portfolio_metrics, reconcile


class PortfolioRepository(ABC):
    @abstractmethod
    def get(self, portfolio_id: int) -> Portfolio | None: ...

    @abstractmethod
    def list(self) -> list[Portfolio]: ...

    @abstractmethod
    def upsert(self, portfolio: Portfolio) -> Portfolio: ...

    @abstractmethod
    def next_id(self) -> int: ...


class AssetCatalog(ABC):
    @abstractmethod
    def get(self, asset_id: int) -> CatalogAsset | None: ...

    @abstractmethod
    def list(self) -> list[CatalogAsset]: ...

    @abstractmethod
    def index(self) -> dict[str, CatalogAsset]: ...

    def find(self, identifier: str) -> CatalogAsset | None:
        return self.index().get(identifier)


class InMemoryPortfolioRepository(PortfolioRepository):
    def __init__(self, portfolios: Iterable[Portfolio] = ()) -> None:
        self._lock = Lock()
        self._items: dict[int, Portfolio] = {p.id: p for p in portfolios}

    def get(self, portfolio_id: int) -> Portfolio | None:
        with self._lock:
            item = self._items.get(portfolio_id)
            return deepcopy(item) if item else None

    def list(self) -> list[Portfolio]:
        with self._lock:
            return [deepcopy(item) for item in sorted(self._items.values(), key=lambda p: p.id)]

    def upsert(self, portfolio: Portfolio) -> Portfolio:
        with self._lock:
            self._items[portfolio.id] = deepcopy(portfolio)
        return portfolio

    def next_id(self) -> int:
        with self._lock:
            return max(self._items, default=0) + 1


class InMemoryAssetCatalog(AssetCatalog):
    def __init__(self, assets: Iterable[CatalogAsset] = ()) -> None:
        self._assets = list(assets)
        self._by_id = {asset.id: asset for asset in self._assets}
        self._index = build_catalog_index(self._assets)

    def get(self, asset_id: int) -> CatalogAsset | None:
        return self._by_id.get(asset_id)

    def list(self) -> list[CatalogAsset]:
        return list(self._assets)

    def index(self) -> dict[str, CatalogAsset]:
        return self._index


class InMemorySentimentRepository:
    def __init__(self, records: Iterable[MarketSentiment] = ()) -> None:
        self._records = list(records)

    def latest(self) -> MarketSentiment | None:
        return max(self._records, key=lambda r: r.date, default=None)

    def history(self, days: int = 7) -> list[MarketSentiment]:
        """Oldest first, at most `days` most recent records."""
        ordered = sorted(self._records, key=lambda r: r.date)
        return ordered[-max(1, days) :]


def seed_catalog() -> InMemoryAssetCatalog:
    return InMemoryAssetCatalog(fixtures.catalog_assets())


def seed_portfolios(catalog: AssetCatalog) -> InMemoryPortfolioRepository:
    portfolios: list[Portfolio] = []
    for idx, (name, created_at, description, is_ai, suggestions) in enumerate(fixtures.portfolio_seeds(), start=1):
        holdings = reconcile(suggestions, catalog.index())
        portfolios.append(
            Portfolio(
                id=idx,
                name=name,
                created_at=created_at,
                user_id=fixtures.DEFAULT_USER_ID,
                description=description,
                is_ai_generated=is_ai,
                holdings=holdings,
                metrics=compute_portfolio_metrics(holdings),
            )
        )
    return InMemoryPortfolioRepository(portfolios)
