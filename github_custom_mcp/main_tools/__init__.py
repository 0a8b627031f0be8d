"""Tool implementations for the main MCP surface."""
