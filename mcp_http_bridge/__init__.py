"""mcp_http_bridge - line-delimited JSON-RPC over stdio, relayed to an HTTP endpoint."""

__version__ = "0.1.0"
__logo__ = "🌉"
