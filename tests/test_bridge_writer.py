import errno
import io
import json

from mcp_http_bridge.bridge.protocol import OutboundMessage
from mcp_http_bridge.bridge.writer import ResponseWriter


class _BrokenStream(io.StringIO):
    def __init__(self, exc: Exception):
        super().__init__()
        self.exc = exc
        self.writes = 0

    def write(self, s: str) -> int:
        self.writes += 1
        raise self.exc


def test_writes_one_json_line_per_message() -> None:
    out = io.StringIO()
    writer = ResponseWriter(out)
    assert writer.write(OutboundMessage(id=1, result={"a": 1})) is True
    assert writer.write(OutboundMessage(id=2, result=None)) is True
    lines = out.getvalue().splitlines()
    assert [json.loads(line)["id"] for line in lines] == [1, 2]
    assert out.getvalue().endswith("\n")


def test_broken_pipe_marks_closed_and_fires_callback_once() -> None:
    reasons: list[str] = []
    stream = _BrokenStream(BrokenPipeError())
    writer = ResponseWriter(stream, on_closed=reasons.append)

    assert writer.write(OutboundMessage(id=1, result=1)) is False
    assert writer.closed is True
    assert writer.write(OutboundMessage(id=2, result=2)) is False
    assert stream.writes == 1
    assert reasons == ["output closed"]


def test_closed_file_object_is_treated_as_disconnect() -> None:
    out = io.StringIO()
    out.close()
    reasons: list[str] = []
    writer = ResponseWriter(out, on_closed=reasons.append)
    assert writer.write(OutboundMessage(id=1, result=1)) is False
    assert reasons == ["output closed"]


def test_epipe_oserror_is_treated_as_disconnect() -> None:
    reasons: list[str] = []
    writer = ResponseWriter(_BrokenStream(OSError(errno.EPIPE, "Broken pipe")), on_closed=reasons.append)
    assert writer.write(OutboundMessage(id=1, result=1)) is False
    assert writer.closed is True
    assert reasons == ["output closed"]


def test_other_oserror_does_not_close_writer() -> None:
    reasons: list[str] = []
    writer = ResponseWriter(_BrokenStream(OSError(errno.EIO, "I/O error")), on_closed=reasons.append)
    assert writer.write(OutboundMessage(id=1, result=1)) is False
    assert writer.closed is False
    assert reasons == []
