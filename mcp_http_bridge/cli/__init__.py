"""CLI module for mcp_http_bridge."""
