"""Pytest hooks and fixtures."""

from collections.abc import Callable

import httpx
import pytest

from mcp_http_bridge.bridge.relay import HttpRelay
from mcp_http_bridge.config.schema import BridgeConfig

ENDPOINT = "https://mcp.example.test/v1/servers/demo/mcp"

_ENV_KEYS = (
    "ENDPOINT",
    "TOKEN",
    "TIMEOUT_MS",
    "RETRIES",
    "VERIFY_TLS",
    "VERBOSE",
    "SESSION_ID",
    "RETRY_BASE_DELAY_SECONDS",
)


@pytest.fixture(autouse=True)
def _isolate_bridge_env(monkeypatch):
    """Keep MCP_BRIDGE_* variables from the developer shell out of tests."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(f"MCP_BRIDGE_{key}", raising=False)


@pytest.fixture
def config() -> BridgeConfig:
    return BridgeConfig(endpoint=ENDPOINT, token="test-token", retries=3)


class SleepRecorder:
    """Stands in for asyncio.sleep so backoff can be asserted without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_relay(config, sleeps) -> Callable[..., HttpRelay]:
    """Build an HttpRelay whose HTTP traffic goes to ``handler``."""

    def _make(handler, *, cfg: BridgeConfig | None = None) -> HttpRelay:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return HttpRelay(cfg or config, client=client, sleep=sleeps)

    return _make
