"""HTTP side of the bridge: POST one JSON-RPC message upstream with retries."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from mcp_http_bridge.config.schema import SESSION_HEADER, BridgeConfig
from mcp_http_bridge.utils.exceptions import UpstreamHttpError

from .errors import is_retryable_failure
from .normalizer import normalize_body
from .protocol import InboundMessage
from .retry import RetryPolicy, with_retry
from .session import SessionToken

ACCEPT = "application/json, text/event-stream"


@dataclass(frozen=True, slots=True)
class RelayResponse:
    """A successful upstream exchange, body already normalized."""

    status: int
    content_type: str
    payload: Any
    attempts: int


class HttpRelay:
    """Delivers messages to the configured endpoint.

    Owns the retry loop and the process-wide session token. The underlying
    ``httpx.AsyncClient`` is created lazily unless one is injected.
    """

    def __init__(
        self,
        config: BridgeConfig,
        *,
        client: httpx.AsyncClient | None = None,
        session: SessionToken | None = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ):
        self.config = config
        self.session = session if session is not None else SessionToken(config.session_id)
        self.policy = RetryPolicy(
            max_attempts=config.retries,
            base_delay_seconds=config.retry_base_delay_seconds,
        )
        self._client = client
        self._owns_client = client is None
        self._sleep = sleep

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout_seconds),
                verify=self.config.verify_tls,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    def request_headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.token}",
            "Content-Type": "application/json",
            "Accept": ACCEPT,
        }
        if self.session.value:
            headers[SESSION_HEADER] = self.session.value
        return headers

    async def relay(self, message: InboundMessage) -> RelayResponse:
        """POST ``message`` and return the normalized reply.

        Raises:
            UpstreamHttpError: non-2xx status (after retries for 5xx).
            httpx.RequestError: network failure after all attempts.
        """
        return await with_retry(
            lambda attempt: self._post_once(message, attempt),
            self.policy,
            is_retryable=is_retryable_failure,
            sleep=self._sleep,
        )

    async def _post_once(self, message: InboundMessage, attempt: int) -> RelayResponse:
        client = await self._get_client()
        body = json.dumps(message.payload, ensure_ascii=False).encode("utf-8")
        response = await client.post(self.config.endpoint, content=body, headers=self.request_headers())
        content_type = response.headers.get("content-type", "")
        # Raw text only; JSON vs SSE is decided from the content type below.
        text = response.text

        if not response.is_success:
            raise UpstreamHttpError(
                response.status_code,
                response.reason_phrase,
                body=text,
                content_type=content_type,
            )

        if self.session.adopt(response.headers.get(SESSION_HEADER)):
            logger.debug("Captured session ID: {}", self.session.value)

        payload = normalize_body(text, content_type)
        return RelayResponse(
            status=response.status_code,
            content_type=content_type,
            payload=payload,
            attempts=attempt,
        )
