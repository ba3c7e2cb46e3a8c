import json

import pytest

from mcp_http_bridge.bridge.protocol import ErrorDetail, OutboundMessage
from mcp_http_bridge.bridge.serialization import (
    encode_outbound_line,
    error_reply,
    parse_error_reply,
    parse_inbound_line,
    restamp_reply,
    result_reply,
)
from mcp_http_bridge.utils.exceptions import InvalidMessageError


def test_parse_inbound_request_and_notification() -> None:
    request = parse_inbound_line('{"jsonrpc":"2.0","id":"a-1","method":"tools/list","params":{}}')
    assert request.id == "a-1"
    assert request.method == "tools/list"
    assert request.is_notification is False

    note = parse_inbound_line('{"jsonrpc":"2.0","method":"notifications/initialized"}')
    assert note.id is None
    assert note.is_notification is True


def test_explicit_null_id_is_not_a_notification() -> None:
    message = parse_inbound_line('{"jsonrpc":"2.0","id":null,"method":"ping"}')
    assert message.is_notification is False
    assert message.id is None


def test_parse_inbound_rejects_malformed_json() -> None:
    with pytest.raises(InvalidMessageError) as exc_info:
        parse_inbound_line("{not json")
    assert "Expecting" in exc_info.value.message


def test_parse_inbound_rejects_non_object() -> None:
    with pytest.raises(InvalidMessageError, match="expected a JSON object"):
        parse_inbound_line("[1, 2, 3]")


def test_parse_error_reply_omits_id() -> None:
    frame = parse_error_reply("boom").to_dict()
    assert frame == {
        "jsonrpc": "2.0",
        "error": {"code": -32700, "message": "Invalid JSON-RPC request", "data": "boom"},
    }


def test_error_reply_omits_absent_data() -> None:
    frame = error_reply(3, ErrorDetail(code=-32002, message="Service timeout")).to_dict()
    assert frame == {"jsonrpc": "2.0", "id": 3, "error": {"code": -32002, "message": "Service timeout"}}


def test_result_reply_keeps_null_result() -> None:
    assert result_reply("x", None).to_dict() == {"jsonrpc": "2.0", "id": "x", "result": None}


def test_restamp_reply_overrides_upstream_id_and_keeps_extras() -> None:
    upstream = {"jsonrpc": "2.0", "id": 99, "result": {"ok": True}, "meta": {"trace": "t"}}
    frame = restamp_reply(upstream, 5).to_dict()
    assert frame == {"jsonrpc": "2.0", "id": 5, "result": {"ok": True}, "meta": {"trace": "t"}}
    assert upstream["id"] == 99


def test_restamp_reply_adds_missing_id() -> None:
    frame = restamp_reply({"jsonrpc": "2.0", "result": 1}, "req-1").to_dict()
    assert frame["id"] == "req-1"


def test_encode_outbound_line_is_single_compact_line() -> None:
    line = encode_outbound_line(OutboundMessage(id=1, result={"text": "a\nb", "name": "café"}))
    assert "\n" not in line
    assert "café" in line
    assert json.loads(line) == {"jsonrpc": "2.0", "id": 1, "result": {"text": "a\nb", "name": "café"}}
