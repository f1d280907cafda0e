"""PDF report MCP tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from portfolio_mcp.tools.common import respond

if TYPE_CHECKING:
    from portfolio_mcp.tools.registry import ToolServices


def register_report_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(
        description=(
            "Generate a markdown portfolio commentary from a local PDF. The PDF text is extracted page by page "
            "and sent to the configured AI model; model overrides the stored model for this call only."
        )
    )
    def generate_portfolio_report(file_path: str, instructions: str | None = None, model: str | None = None) -> str:
        return respond(
            services,
            "generate_portfolio_report",
            lambda: services.report.generate_report(file_path, instructions=instructions, model=model),
            file_path,
        )
