"""Stdio event loop: read units from stdin, dispatch each one concurrently."""

from __future__ import annotations

import asyncio
import contextlib
import signal
import sys
import threading
from typing import BinaryIO

from loguru import logger

from mcp_http_bridge.config.schema import BridgeConfig

from .dispatcher import MessageDispatcher
from .framing import LineFramer
from .relay import HttpRelay
from .writer import ResponseWriter

CHUNK_SIZE = 64 * 1024


def _stdin_binary() -> BinaryIO:
    return getattr(sys.stdin, "buffer", sys.stdin)


def _pump_in_thread(loop: asyncio.AbstractEventLoop, reader: asyncio.StreamReader, stream: BinaryIO) -> None:
    """Feed ``reader`` from a blocking stream on a daemon thread.

    Used when stdin is not pipe-like (regular file redirect, Windows console).
    """

    def _run() -> None:
        read = getattr(stream, "read1", stream.read)
        try:
            while True:
                chunk = read(CHUNK_SIZE)
                if not chunk:
                    break
                loop.call_soon_threadsafe(reader.feed_data, chunk)
        except (OSError, ValueError) as e:
            logger.debug("stdin reader stopped: {}", e)
        finally:
            with contextlib.suppress(RuntimeError):
                loop.call_soon_threadsafe(reader.feed_eof)

    threading.Thread(target=_run, daemon=True, name="stdin-reader").start()


async def open_stdin_reader(
    stream: BinaryIO | None = None,
) -> tuple[asyncio.StreamReader, asyncio.BaseTransport | None]:
    """Wrap stdin in an ``asyncio.StreamReader``."""
    stream = stream if stream is not None else _stdin_binary()
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    try:
        transport, _ = await loop.connect_read_pipe(lambda: protocol, stream)
    except (ValueError, OSError, NotImplementedError):
        _pump_in_thread(loop, reader, stream)
        return reader, None
    return reader, transport


class StdioBridge:
    """Owns the read loop, in-flight workers and the shutdown token.

    ``shutdown_event`` is the only cancellation signal: signal handlers and a
    closed output sink trip it, the read loop observes it and abandons any
    in-flight work.
    """

    def __init__(
        self,
        config: BridgeConfig,
        *,
        relay: HttpRelay | None = None,
        writer: ResponseWriter | None = None,
    ):
        self.config = config
        self.relay = relay if relay is not None else HttpRelay(config)
        self.dispatcher = MessageDispatcher(self.relay)
        self.writer = writer if writer is not None else ResponseWriter()
        if self.writer.on_closed is None:
            self.writer.on_closed = self.request_shutdown
        self.shutdown_event = asyncio.Event()
        self.shutdown_reason: str | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def in_flight(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    def request_shutdown(self, reason: str = "shutdown requested") -> None:
        if self.shutdown_event.is_set():
            return
        self.shutdown_reason = reason
        logger.debug("Shutdown requested: {}", reason)
        self.shutdown_event.set()

    def install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_shutdown, f"received {sig.name}")
            except (NotImplementedError, RuntimeError):
                signal.signal(
                    sig,
                    lambda signum, _frame: loop.call_soon_threadsafe(
                        self.request_shutdown, f"received {signal.Signals(signum).name}"
                    ),
                )

    def submit(self, line: str) -> asyncio.Task[None]:
        task = asyncio.create_task(self._handle(line))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _handle(self, line: str) -> None:
        try:
            reply = await self.dispatcher.dispatch(line)
        except Exception as e:
            logger.error("Unhandled error in request processing: {}", e)
            return
        if reply is not None and not self.shutdown_event.is_set():
            self.writer.write(reply)

    async def run(self, reader: asyncio.StreamReader | None = None) -> None:
        """Serve until end of input (drain in-flight work) or shutdown (abandon it)."""
        transport = None
        if reader is None:
            reader, transport = await open_stdin_reader()
        framer = LineFramer()
        stop = asyncio.create_task(self.shutdown_event.wait())
        try:
            while not self.shutdown_event.is_set():
                read = asyncio.create_task(reader.read(CHUNK_SIZE))
                done, _ = await asyncio.wait({read, stop}, return_when=asyncio.FIRST_COMPLETED)
                if read not in done:
                    read.cancel()
                    break
                chunk = read.result()
                if not chunk:
                    for line in framer.finish():
                        self.submit(line)
                    logger.debug("End of input, waiting for {} in-flight request(s)", self.in_flight)
                    break
                for line in framer.feed(chunk):
                    self.submit(line)
            await self._drain(stop)
        finally:
            stop.cancel()
            await self._abandon()
            await self.relay.close()
            if transport is not None:
                transport.close()

    async def _drain(self, stop: asyncio.Task[bool]) -> None:
        while not self.shutdown_event.is_set():
            pending = {task for task in self._tasks if not task.done()}
            if not pending:
                return
            await asyncio.wait(pending | {stop}, return_when=asyncio.FIRST_COMPLETED)

    async def _abandon(self) -> None:
        pending = [task for task in self._tasks if not task.done()]
        if not pending:
            return
        logger.debug("Abandoning {} in-flight request(s)", len(pending))
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
