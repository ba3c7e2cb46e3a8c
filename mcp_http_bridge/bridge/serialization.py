"""Serialization helpers for JSON-RPC frames on the stdio side."""

from __future__ import annotations

import json
from typing import Any

from mcp_http_bridge.utils.exceptions import InvalidMessageError

from .protocol import PARSE_ERROR, ErrorDetail, InboundMessage, OutboundMessage, RequestId


def parse_inbound_line(line: str) -> InboundMessage:
    """Decode one framed unit; raises InvalidMessageError carrying the parser text."""
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as exc:
        raise InvalidMessageError(str(exc)) from exc
    if not isinstance(payload, dict):
        raise InvalidMessageError(f"expected a JSON object, got {type(payload).__name__}")
    return InboundMessage(payload=payload)


def encode_outbound_line(message: OutboundMessage) -> str:
    """Encode a reply frame into one line of JSON (no trailing newline)."""
    return json.dumps(message.to_dict(), ensure_ascii=False, separators=(",", ":"))


def parse_error_reply(detail: str) -> OutboundMessage:
    """Reply for a unit that could not be parsed; it has no id to echo."""
    return OutboundMessage(
        error=ErrorDetail(code=PARSE_ERROR, message="Invalid JSON-RPC request", data=detail),
        omit_id=True,
    )


def error_reply(request_id: RequestId, detail: ErrorDetail) -> OutboundMessage:
    return OutboundMessage(id=request_id, error=detail)


def result_reply(request_id: RequestId, result: Any) -> OutboundMessage:
    return OutboundMessage(id=request_id, result=result)


def restamp_reply(reply: dict[str, Any], request_id: RequestId) -> OutboundMessage:
    """Pass a complete upstream reply through with the caller's id."""
    frame = dict(reply)
    frame["id"] = request_id
    return OutboundMessage(id=request_id, passthrough=frame)
