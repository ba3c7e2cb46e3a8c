"""Map relay failures onto JSON-RPC error details."""

from __future__ import annotations

import asyncio

import httpx

from mcp_http_bridge.utils.exceptions import (
    UpstreamHttpError,
    is_connection_refused,
    sanitize_error_message,
)

from .normalizer import normalize_body
from .protocol import (
    INTERNAL_ERROR,
    SERVER_ERROR,
    SERVICE_TIMEOUT,
    SERVICE_UNAVAILABLE,
    ErrorDetail,
)


def is_retryable_failure(exc: Exception) -> bool:
    """5xx statuses and network-class failures are retried; 4xx never is."""
    if isinstance(exc, UpstreamHttpError):
        return exc.retryable
    return isinstance(exc, httpx.RequestError)


def error_detail_for(exc: Exception) -> ErrorDetail:
    """Build the error object returned to the caller for a failed relay."""
    if isinstance(exc, UpstreamHttpError):
        data = normalize_body(exc.body, exc.content_type) if exc.body.strip() else None
        return ErrorDetail(code=SERVER_ERROR, message=exc.message, data=data)
    if is_connection_refused(exc):
        return ErrorDetail(code=SERVICE_UNAVAILABLE, message="Service unavailable - connection refused")
    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return ErrorDetail(code=SERVICE_TIMEOUT, message="Service timeout")
    message = sanitize_error_message(str(exc)) or type(exc).__name__
    return ErrorDetail(code=INTERNAL_ERROR, message=message, data=type(exc).__name__)
