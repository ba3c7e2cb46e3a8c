"""Configuration module for mcp_http_bridge."""

from mcp_http_bridge.config.loader import load_config
from mcp_http_bridge.config.schema import SESSION_HEADER, BridgeConfig

__all__ = ["BridgeConfig", "SESSION_HEADER", "load_config"]
