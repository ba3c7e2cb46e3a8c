"""Utility functions for mcp_http_bridge."""

from mcp_http_bridge.utils.exceptions import (
    BridgeError,
    ConfigError,
    ErrorCategory,
    InvalidMessageError,
    UpstreamHttpError,
    is_connection_refused,
    sanitize_error_message,
)

__all__ = [
    "BridgeError",
    "ConfigError",
    "ErrorCategory",
    "InvalidMessageError",
    "UpstreamHttpError",
    "is_connection_refused",
    "sanitize_error_message",
]
