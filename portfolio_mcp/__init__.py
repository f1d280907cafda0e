"""Portfolio AI MCP server."""
