"""JSON-RPC 2.0 frame models shared by the bridge pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

JSONRPC_VERSION = "2.0"

PARSE_ERROR = -32700
INTERNAL_ERROR = -32603
SERVER_ERROR = -32000
SERVICE_UNAVAILABLE = -32001
SERVICE_TIMEOUT = -32002

RequestId = Union[str, int, float, None]


@dataclass(frozen=True, slots=True)
class ErrorDetail:
    """JSON-RPC error object; ``data`` is omitted from the wire when None."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        row: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            row["data"] = self.data
        return row


@dataclass(frozen=True, slots=True)
class InboundMessage:
    """One parsed request or notification, forwarded upstream verbatim."""

    payload: dict[str, Any]

    @property
    def id(self) -> RequestId:
        return self.payload.get("id")

    @property
    def method(self) -> str:
        return str(self.payload.get("method") or "")

    @property
    def is_notification(self) -> bool:
        return "id" not in self.payload


@dataclass(frozen=True, slots=True)
class OutboundMessage:
    """One reply line.

    Exactly one of ``result``/``error`` is serialized, unless ``passthrough``
    holds a complete upstream reply that is emitted as-is.
    """

    id: RequestId = None
    result: Any = None
    error: ErrorDetail | None = None
    passthrough: dict[str, Any] | None = None
    omit_id: bool = False

    def to_dict(self) -> dict[str, Any]:
        if self.passthrough is not None:
            return dict(self.passthrough)
        frame: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION}
        if not self.omit_id:
            frame["id"] = self.id
        if self.error is not None:
            frame["error"] = self.error.to_dict()
        else:
            frame["result"] = self.result
        return frame
