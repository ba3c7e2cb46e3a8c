"""Stdio JSON-RPC to HTTP relay pipeline."""

from .dispatcher import MessageDispatcher
from .framing import LineFramer
from .normalizer import ReplyShape, classify_reply, normalize_body, parse_sse_body
from .protocol import ErrorDetail, InboundMessage, OutboundMessage
from .relay import HttpRelay, RelayResponse
from .retry import RetryPolicy, with_retry
from .runtime import StdioBridge
from .session import SessionToken
from .writer import ResponseWriter

__all__ = [
    "ErrorDetail",
    "HttpRelay",
    "InboundMessage",
    "LineFramer",
    "MessageDispatcher",
    "OutboundMessage",
    "RelayResponse",
    "ReplyShape",
    "ResponseWriter",
    "RetryPolicy",
    "SessionToken",
    "StdioBridge",
    "classify_reply",
    "normalize_body",
    "parse_sse_body",
    "with_retry",
]
