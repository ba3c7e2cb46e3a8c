"""Configuration loading utilities."""

from typing import Any

from pydantic import ValidationError

from mcp_http_bridge.config.schema import BridgeConfig
from mcp_http_bridge.utils.exceptions import ConfigError


def load_config(**overrides: Any) -> BridgeConfig:
    """
    Build the bridge configuration.

    Explicit overrides (typically CLI options) win over ``MCP_BRIDGE_*``
    environment variables; ``None`` overrides are ignored so that unset CLI
    options fall through to the environment and then to defaults.

    Raises:
        ConfigError: when the merged configuration does not validate.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return BridgeConfig(**values)
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        loc = ".".join(str(part) for part in first.get("loc", ())) or None
        reason = first.get("msg", str(e))
        message = f"Invalid configuration for '{loc}': {reason}" if loc else f"Invalid configuration: {reason}"
        raise ConfigError(message, field=loc) from e
