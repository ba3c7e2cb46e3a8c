"""Stdout side of the bridge."""

from __future__ import annotations

import errno
import sys
from collections.abc import Callable
from typing import TextIO

from loguru import logger

from .protocol import OutboundMessage
from .serialization import encode_outbound_line


class ResponseWriter:
    """Writes one reply per line.

    Each reply is a single ``write`` followed by ``flush`` on the event loop
    thread, so lines from concurrent workers never interleave. A closed sink
    flips the writer to closed and fires ``on_closed`` once.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        on_closed: Callable[[str], None] | None = None,
    ):
        self._stream = stream if stream is not None else sys.stdout
        self.on_closed = on_closed
        self.closed = False

    def write(self, message: OutboundMessage) -> bool:
        """Return True when the line reached the sink."""
        if self.closed:
            return False
        line = encode_outbound_line(message) + "\n"
        logger.debug("Sending response: {}", line.rstrip("\n"))
        try:
            self._stream.write(line)
            self._stream.flush()
        except (BrokenPipeError, ConnectionResetError):
            self._mark_closed()
            return False
        except ValueError:
            # write/flush on a closed file object
            self._mark_closed()
            return False
        except OSError as e:
            if e.errno == errno.EPIPE:
                self._mark_closed()
                return False
            logger.error("Error writing response: {}", e)
            return False
        return True

    def _mark_closed(self) -> None:
        if self.closed:
            return
        self.closed = True
        logger.info("Client disconnected, stopping bridge")
        if self.on_closed is not None:
            self.on_closed("output closed")
