"""MCP tool registration."""
