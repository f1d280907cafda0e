"""Result and context types shared by the service layer."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from portfolio_mcp.cache.ttl_cache import TTLCache

T = TypeVar("T")


@dataclass
class ErrorEnvelope:
    code: str
    message: str
    retriable: bool = True


@dataclass
class ServiceResult(Generic[T]):
    """Either `data` (possibly degraded, see `warning`) or an `error`, never both.

    `data_provider` names who answered: `local`, a provider key, or `placeholder`.
    """

    data: T | None
    source: str | None = None
    warning: str | None = None
    error: ErrorEnvelope | None = None
    fetched_at: float | None = None
    data_provider: str | None = None


@dataclass
class ServiceContext:
    """Providers keyed by name (`riskprofile`, `provider_status`) plus shared cache and metrics."""

    providers: dict[str, object]
    cache: TTLCache
    cache_ttl_seconds: int = 300
    server_metrics: object | None = None

    def get_provider(self, name: str) -> object | None:
        return self.providers.get(name)


def not_found(message: str) -> ServiceResult:
    return ServiceResult(data=None, error=ErrorEnvelope(code="NOT_FOUND", message=message, retriable=False))


def local_result(data: T, source: str = "local") -> ServiceResult[T]:
    return ServiceResult(data=data, source=source, fetched_at=time.time(), data_provider=source)


def run_with_cache(
    ctx: ServiceContext,
    cache_key: str,
    call: Callable[[], T | None],
    ttl_seconds: int | None = None,
) -> T | None:
    return ctx.cache.get_or_load(cache_key, call, ttl_seconds=ttl_seconds or ctx.cache_ttl_seconds)
