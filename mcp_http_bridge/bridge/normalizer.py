"""Turn upstream response bodies into a single structured value.

Upstreams answer either with a plain JSON document or with a Server-Sent
Events body whose ``data:`` lines carry one (possibly split) JSON document.
The relay hands over the raw text untouched so the same bytes can go down
either path.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from loguru import logger

from .protocol import JSONRPC_VERSION

EVENT_STREAM = "text/event-stream"
SSE_DATA_PREFIX = "data: "
SSE_DONE = "[DONE]"
SSE_PARSE_FAILURE = {"error": "Failed to parse SSE response"}


class ReplyShape(Enum):
    """How the dispatcher should treat a normalized upstream payload."""
    EMPTY = "empty"
    FULL_REPLY = "full_reply"
    RAW = "raw"


def is_event_stream(content_type: str | None) -> bool:
    return bool(content_type) and EVENT_STREAM in content_type.lower()


def parse_sse_body(text: str) -> Any:
    """Join every ``data:`` fragment up to ``[DONE]`` and decode it as JSON.

    Returns None when the body carries no data lines at all.
    """
    fragments: list[str] = []
    for line in text.split("\n"):
        line = line.rstrip("\r")
        if not line.startswith(SSE_DATA_PREFIX):
            continue
        data = line[len(SSE_DATA_PREFIX):]
        if data.strip() == SSE_DONE:
            break
        fragments.append(data)
    joined = "".join(fragments)
    if not joined:
        return None
    try:
        return json.loads(joined)
    except json.JSONDecodeError as e:
        logger.debug("Failed to parse SSE JSON: {}", e)
        return dict(SSE_PARSE_FAILURE)


def normalize_body(text: str, content_type: str | None) -> Any:
    """Decode a response body according to its declared content type.

    Non-SSE bodies that are not valid JSON are returned verbatim.
    """
    if is_event_stream(content_type):
        return parse_sse_body(text)
    try:
        return json.loads(text)
    except ValueError:
        return text


def classify_reply(payload: Any) -> ReplyShape:
    """Evaluate the payload shape once for the dispatcher."""
    if payload is None:
        return ReplyShape.EMPTY
    if isinstance(payload, str) and not payload.strip():
        return ReplyShape.EMPTY
    if isinstance(payload, (dict, list)) and not payload:
        return ReplyShape.EMPTY
    if (
        isinstance(payload, dict)
        and payload.get("jsonrpc") == JSONRPC_VERSION
        and ("result" in payload or "error" in payload)
    ):
        return ReplyShape.FULL_REPLY
    return ReplyShape.RAW
