"""Domain tool registry entrypoint."""

from __future__ import annotations

from dataclasses import dataclass, replace

from mcp.server.fastmcp import FastMCP

from portfolio_mcp.config.ai_settings_store import AISettingsStore
from portfolio_mcp.config.settings import Settings
from portfolio_mcp.portfolio.fixtures import sentiment_history
from portfolio_mcp.portfolio.repository import (
    AssetCatalog,
    InMemorySentimentRepository,
    PortfolioRepository,
    seed_catalog,
    seed_portfolios,
)
from portfolio_mcp.providers.completion_client import CompletionClient, build_completion_client
from portfolio_mcp.runtime.monitoring import ServerMetrics
from portfolio_mcp.services.ai_service import AIService, CompletionFactory
from portfolio_mcp.services.base import ServiceContext
from portfolio_mcp.services.market_service import MarketService
from portfolio_mcp.services.portfolio_service import PortfolioService
from portfolio_mcp.services.report_service import ReportService
from portfolio_mcp.services.runtime_service import RuntimeService
from portfolio_mcp.tools.ai_tools import register_ai_tools
from portfolio_mcp.tools.market_tools import register_market_tools
from portfolio_mcp.tools.portfolio_tools import register_portfolio_tools
from portfolio_mcp.tools.report_tools import register_report_tools
from portfolio_mcp.tools.runtime_tools import register_runtime_tools
from portfolio_mcp.tools.settings_tools import register_settings_tools


@dataclass
class ToolServices:
    portfolio: PortfolioService
    ai: AIService
    market: MarketService
    report: ReportService
    runtime: RuntimeService
    ai_settings: AISettingsStore
    server_metrics: ServerMetrics | None = None


def make_completion_factory(settings: Settings, store: AISettingsStore) -> CompletionFactory:
    """Build a client from the stored settings on every call so updates apply immediately."""

    def factory(model: str | None = None) -> CompletionClient | None:
        if not settings.enable_ai:
            return None
        ai_settings = store.load()
        if model:
            ai_settings = replace(ai_settings, model=model)
        return build_completion_client(
            ai_settings,
            timeout_seconds=settings.request_timeout_seconds,
            openrouter_base_url=settings.openrouter_base_url,
        )

    return factory


def build_tool_services(
    ctx: ServiceContext,
    ai_settings: AISettingsStore,
    completion_factory: CompletionFactory,
    catalog: AssetCatalog | None = None,
    portfolios: PortfolioRepository | None = None,
    sentiment: InMemorySentimentRepository | None = None,
) -> ToolServices:
    catalog = catalog or seed_catalog()
    portfolios = portfolios or seed_portfolios(catalog)
    sentiment = sentiment or InMemorySentimentRepository(sentiment_history())
    ai = AIService(ctx, catalog, portfolios, completion_factory)
    server_metrics = ctx.server_metrics if isinstance(ctx.server_metrics, ServerMetrics) else None
    return ToolServices(
        portfolio=PortfolioService(portfolios, catalog, ai),
        ai=ai,
        market=MarketService(sentiment, ai),
        report=ReportService(ctx, completion_factory),
        runtime=RuntimeService(ctx),
        ai_settings=ai_settings,
        server_metrics=server_metrics,
    )


def register_all_tools(mcp: FastMCP, services: ToolServices) -> None:
    register_portfolio_tools(mcp, services)
    register_ai_tools(mcp, services)
    register_market_tools(mcp, services)
    register_report_tools(mcp, services)
    register_settings_tools(mcp, services)
    register_runtime_tools(mcp, services)
