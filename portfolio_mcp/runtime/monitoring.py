"""Tool-call accounting for the health tool, plus one JSON log line per call.

Stdout belongs to the stdio transport, so tool events go through `logging`.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any

LOGGER = logging.getLogger(__name__)


@dataclass
class ToolCounters:
    calls: int = 0
    errors: int = 0
    placeholders: int = 0
    latency_ms: float = 0.0


@dataclass
class HealthSnapshot:
    uptime_seconds: float
    total_requests: int
    error_rate: float
    placeholder_rate: float
    avg_latency_ms: float
    provider_status: dict[str, Any]
    cache: dict[str, int] = field(default_factory=dict)
    tools: dict[str, dict[str, float]] = field(default_factory=dict)


class ServerMetrics:
    def __init__(self, started_at: float | None = None) -> None:
        self.started_at = started_at or time.time()
        self._lock = threading.Lock()
        self._tools: dict[str, ToolCounters] = {}

    def record(self, tool: str, latency_ms: float, success: bool, placeholder: bool = False) -> None:
        with self._lock:
            counters = self._tools.setdefault(tool, ToolCounters())
            counters.calls += 1
            counters.errors += 0 if success else 1
            counters.placeholders += 1 if placeholder else 0
            counters.latency_ms += max(0.0, latency_ms)

    def snapshot(self, provider_status: dict[str, Any], cache: dict[str, int] | None = None) -> HealthSnapshot:
        with self._lock:
            tools = {name: ToolCounters(**vars(counters)) for name, counters in self._tools.items()}
        calls = sum(counters.calls for counters in tools.values())

        def _rate(count: float) -> float:
            return count / calls if calls else 0.0

        return HealthSnapshot(
            uptime_seconds=max(0.0, time.time() - self.started_at),
            total_requests=calls,
            error_rate=_rate(sum(counters.errors for counters in tools.values())),
            placeholder_rate=_rate(sum(counters.placeholders for counters in tools.values())),
            avg_latency_ms=_rate(sum(counters.latency_ms for counters in tools.values())),
            provider_status=provider_status,
            cache=cache or {},
            tools={
                name: {
                    "calls": counters.calls,
                    "errors": counters.errors,
                    "placeholders": counters.placeholders,
                    "avg_latency_ms": round(counters.latency_ms / counters.calls, 3),
                }
                for name, counters in sorted(tools.items())
            },
        )


def log_tool_event(
    tool: str,
    subject: str | None,
    latency_ms: float,
    success: bool,
    data_provider: str | None = None,
    warning: str | None = None,
) -> None:
    event: dict[str, Any] = {"event": "tool_call", "tool": tool, "success": success, "latency_ms": round(latency_ms, 3)}
    if subject:
        event["subject"] = subject
    if data_provider:
        event["data_provider"] = data_provider
    if warning:
        event["warning"] = warning
    LOGGER.info(json.dumps(event, ensure_ascii=True, sort_keys=True))
