"""Per-unit pipeline: parse, relay upstream, shape the reply."""

from __future__ import annotations

from loguru import logger

from mcp_http_bridge.utils.exceptions import InvalidMessageError

from .errors import error_detail_for
from .normalizer import ReplyShape, classify_reply
from .protocol import InboundMessage, OutboundMessage
from .relay import HttpRelay
from .serialization import (
    error_reply,
    parse_error_reply,
    parse_inbound_line,
    restamp_reply,
    result_reply,
)


class MessageDispatcher:
    """Turns one framed input unit into zero or one reply.

    Never raises for upstream failures; every request with an id gets an
    answer unless the upstream body was empty.
    """

    def __init__(self, relay: HttpRelay):
        self.relay = relay

    async def dispatch(self, line: str) -> OutboundMessage | None:
        try:
            message = parse_inbound_line(line)
        except InvalidMessageError as e:
            logger.error("Error processing request: {}", e.message)
            return parse_error_reply(e.message)

        logger.debug("Processing request: {} (id: {})", message.method, message.id)
        reply = await self.forward(message)
        if reply is not None and message.is_notification:
            logger.debug("No response sent for notification {}", message.method)
            return None
        return reply

    async def forward(self, message: InboundMessage) -> OutboundMessage | None:
        try:
            response = await self.relay.relay(message)
        except Exception as e:
            detail = error_detail_for(e)
            logger.warning(
                "Request {} (id: {}) failed [{}]: {}",
                message.method, message.id, detail.code, detail.message,
            )
            return error_reply(message.id, detail)

        payload = response.payload
        shape = classify_reply(payload)
        logger.debug("Upstream reply for id {} classified as {}", message.id, shape.value)
        if shape is ReplyShape.EMPTY:
            return None
        if shape is ReplyShape.FULL_REPLY:
            return restamp_reply(payload, message.id)
        return result_reply(message.id, payload)
