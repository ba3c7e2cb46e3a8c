"""Configuration schema using Pydantic.

One immutable settings object per process; every field can also come from an
``MCP_BRIDGE_*`` environment variable.
"""

from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SESSION_HEADER = "mcp-session-id"


class BridgeConfig(BaseSettings):
    """Root configuration for the stdio-to-HTTP bridge."""
    endpoint: str  # Upstream MCP endpoint, e.g. "https://host/v1/servers/x/mcp"
    token: str  # Bearer credential sent on every request
    timeout_ms: int = Field(default=30000, gt=0)
    retries: int = Field(default=3, ge=1)  # Total attempts, first try included
    verify_tls: bool = True
    verbose: bool = False
    session_id: str | None = None  # Pre-seeded session token (optional)
    retry_base_delay_seconds: float = Field(default=1.0, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="MCP_BRIDGE_",
        frozen=True,
    )

    @field_validator("endpoint")
    @classmethod
    def _check_endpoint(cls, value: str) -> str:
        value = value.strip()
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("endpoint must be an absolute http(s) URL")
        return value

    @field_validator("token")
    @classmethod
    def _check_token(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("token must not be empty")
        return value

    @field_validator("session_id")
    @classmethod
    def _blank_session_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    def masked_token(self, visible: int = 8) -> str:
        """Token prefix for diagnostics; never log the full credential."""
        if len(self.token) <= visible:
            return "*" * len(self.token)
        return f"{self.token[:visible]}..."
