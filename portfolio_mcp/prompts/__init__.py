"""MCP prompt definitions."""
