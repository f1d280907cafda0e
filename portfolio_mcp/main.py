"""Entrypoint: wire repositories, AI providers and MCP surfaces, then serve."""

from __future__ import annotations

import asyncio
import logging
import os

from mcp.server.fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from portfolio_mcp.cache.ttl_cache import TTLCache
from portfolio_mcp.config.ai_settings_store import AISettingsStore
from portfolio_mcp.config.settings import Settings, get_settings
from portfolio_mcp.prompts.portfolio_prompts import register_portfolio_prompts
from portfolio_mcp.providers.risk_profile import RiskProfileClient
from portfolio_mcp.resources.portfolio_resources import register_portfolio_resources
from portfolio_mcp.runtime.monitoring import ServerMetrics
from portfolio_mcp.services.base import ServiceContext
from portfolio_mcp.services.provider_status import ProviderStatus
from portfolio_mcp.tools.registry import build_tool_services, make_completion_factory, register_all_tools

LOGGER = logging.getLogger(__name__)

# Any of these being set means a hosting platform is routing traffic to PORT.
HOSTED_MARKERS = ("RENDER", "PORT")
HTTP_TRANSPORTS = ("sse", "streamable")
RUNNERS = {
    "stdio": FastMCP.run_stdio_async,
    "sse": FastMCP.run_sse_async,
    "streamable": FastMCP.run_streamable_http_async,
}


def is_hosted() -> bool:
    return any(os.getenv(marker) for marker in HOSTED_MARKERS)


def resolve_transport(mode: str, http_transport: str = "sse") -> str:
    """Return the runner key: `stdio`, `sse` or `streamable`.

    `auto` (or anything unrecognised) serves stdio locally and HTTP when hosted.
    Render cannot attach a stdio client, so there it overrides an explicit `stdio`.
    """
    if mode not in {"stdio", "http"}:
        mode = "http" if is_hosted() else "stdio"
    elif mode == "stdio" and os.getenv("RENDER"):
        LOGGER.warning("TRANSPORT_MODE=stdio ignored on Render; serving HTTP")
        mode = "http"
    if mode == "stdio":
        return "stdio"
    return http_transport if http_transport in HTTP_TRANSPORTS else "sse"


def configure_logging(level: str) -> None:
    # Default stream is stderr, which keeps stdout clean for the stdio transport.
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _risk_profile_client(settings: Settings) -> RiskProfileClient | None:
    if not settings.risk_profile_feed_url:
        LOGGER.info("RISK_PROFILE_FEED_URL not set; risk_level strategy uses the AI model only.")
        return None
    return RiskProfileClient(settings.risk_profile_feed_url, settings.request_timeout_seconds)


def _warn_if_ai_unavailable(settings: Settings, store: AISettingsStore) -> None:
    if not settings.enable_ai:
        LOGGER.warning("AI disabled (ENABLE_AI=false); every AI tool answers with placeholder data.")
        return
    stored = store.load()
    if not stored.api_key:
        LOGGER.warning(
            "no API key configured for provider=%s; set OPENROUTER_API_KEY / ANTHROPIC_API_KEY or call "
            "update_ai_settings. AI tools fall back to placeholder data.",
            stored.provider,
        )


def build_server(settings: Settings) -> FastMCP:
    ai_settings = AISettingsStore.from_settings(settings)
    ctx = ServiceContext(
        providers={
            "riskprofile": _risk_profile_client(settings),
            "provider_status": ProviderStatus(),
        },
        cache=TTLCache(default_ttl_seconds=settings.cache_ttl_seconds),
        cache_ttl_seconds=settings.cache_ttl_seconds,
        server_metrics=ServerMetrics(),
    )
    services = build_tool_services(
        ctx,
        ai_settings=ai_settings,
        completion_factory=make_completion_factory(settings, ai_settings),
    )

    mcp = FastMCP(
        name=settings.app_name,
        host=settings.host,
        port=settings.port,
        streamable_http_path=settings.mcp_path,
    )
    register_all_tools(mcp, services)
    register_portfolio_prompts(mcp)
    register_portfolio_resources(mcp, services)

    @mcp.custom_route(settings.health_path, methods=["GET"])
    async def health(_: Request) -> JSONResponse:
        portfolios = services.portfolio.list_portfolios().data or []
        return JSONResponse(
            {
                "status": "ok",
                "service": settings.app_name,
                "version": settings.app_version,
                "transport": resolve_transport(settings.transport_mode, settings.http_transport),
                "ai_enabled": settings.enable_ai,
                "portfolio_count": len(portfolios),
                "tool_count": len(await mcp.list_tools()),
                "prompt_count": len(await mcp.list_prompts()),
                "resource_count": len(await mcp.list_resources()),
                "resource_template_count": len(await mcp.list_resource_templates()),
            }
        )

    _warn_if_ai_unavailable(settings, ai_settings)
    return mcp


async def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    transport = resolve_transport(settings.transport_mode, settings.http_transport)
    mcp = build_server(settings)
    LOGGER.info("starting %s %s: transport=%s", settings.app_name, settings.app_version, transport)
    await RUNNERS[transport](mcp)


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
