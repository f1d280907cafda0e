"""Shared tool-layer helpers."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Callable

from portfolio_mcp.runtime.monitoring import log_tool_event
from portfolio_mcp.runtime.response import error_response, result_response
from portfolio_mcp.services.base import ServiceResult
from portfolio_mcp.services.fallback_manager import PLACEHOLDER_KEY

if TYPE_CHECKING:
    from portfolio_mcp.tools.registry import ToolServices


def respond(
    services: "ToolServices",
    tool: str,
    call: Callable[[], ServiceResult[Any]],
    subject: str | None = None,
) -> str:
    """Run a service call and shape it as tool JSON; validation errors become INVALID_INPUT envelopes."""
    started = time.perf_counter()
    success = False
    warning: str | None = None
    provider: str | None = None
    try:
        result = call()
        success = result.data is not None
        warning = result.warning
        provider = result.data_provider
        return result_response(result)
    except ValueError as error:
        return error_response("INVALID_INPUT", str(error))
    finally:
        latency_ms = (time.perf_counter() - started) * 1000.0
        log_tool_event(
            tool=tool,
            subject=subject,
            latency_ms=latency_ms,
            success=success,
            data_provider=provider,
            warning=warning,
        )
        if services.server_metrics is not None:
            services.server_metrics.record(
                tool, latency_ms=latency_ms, success=success, placeholder=provider == PLACEHOLDER_KEY
            )
