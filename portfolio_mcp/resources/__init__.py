"""MCP resource definitions."""
