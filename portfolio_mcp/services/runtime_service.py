"""Runtime health service."""

from __future__ import annotations

from portfolio_mcp.providers.models import COMPLETION_PROVIDERS
from portfolio_mcp.runtime.monitoring import HealthSnapshot, ServerMetrics
from portfolio_mcp.services.base import ServiceContext
from portfolio_mcp.services.provider_status import ProviderStatus

MONITORED_PROVIDERS = (*COMPLETION_PROVIDERS, "riskprofile")


class RuntimeService:
    def __init__(self, ctx: ServiceContext) -> None:
        self.ctx = ctx

    def get_server_health(self) -> HealthSnapshot:
        status = self.ctx.get_provider("provider_status")
        provider_status = status.snapshot(MONITORED_PROVIDERS) if isinstance(status, ProviderStatus) else {}
        metrics = self.ctx.server_metrics
        if not isinstance(metrics, ServerMetrics):
            return HealthSnapshot(
                uptime_seconds=0.0,
                total_requests=0,
                error_rate=0.0,
                placeholder_rate=0.0,
                avg_latency_ms=0.0,
                provider_status=provider_status,
                cache=self.ctx.cache.stats(),
            )
        return metrics.snapshot(provider_status, cache=self.ctx.cache.stats())
