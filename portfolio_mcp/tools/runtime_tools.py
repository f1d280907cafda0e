"""Operational tools."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

if TYPE_CHECKING:
    from portfolio_mcp.tools.registry import ToolServices


def register_runtime_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(
        description=(
            "Server health: uptime, per-tool calls/errors/placeholder answers, risk-feed cache hits, "
            "and per-provider failures with any open rate-limit window."
        )
    )
    def get_server_health() -> str:
        # Not routed through respond(), so health checks do not skew the counters they report.
        return json.dumps(asdict(services.runtime.get_server_health()), ensure_ascii=True)
