"""Newline framing for the stdin side of the bridge."""

from __future__ import annotations

import codecs


class LineFramer:
    """Incremental splitter: feed raw chunks, get back complete, non-blank lines.

    Partial trailing data stays buffered until a later chunk terminates it or
    ``finish()`` flushes it at end of input.
    """

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        return self._buffer

    def feed(self, chunk: bytes | str) -> list[str]:
        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        if not chunk:
            return []
        self._buffer += chunk
        *complete, self._buffer = self._buffer.split("\n")
        return [line.strip() for line in complete if line.strip()]

    def finish(self) -> list[str]:
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        text = tail.strip()
        return [text] if text else []
