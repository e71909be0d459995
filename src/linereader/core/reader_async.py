from __future__ import annotations

"""
Cooperative Line Source.

Asynchronous counterpart of the blocking reader built on anyio. Each chunk
read is handed to a worker thread and awaited, which makes every fill a
suspension point for the event loop. The decoded accumulator itself is only
touched from the task awaiting the reader, and an anyio.Lock keeps fills of
one instance strictly sequential.
"""

import enum
import logging
from typing import Any, AsyncIterator, Optional

import anyio
import anyio.to_thread

from linereader.core.buffer import LineBuffer
from linereader.core.scanner import build_separator
from linereader.core.validator import validate_options
from linereader.domain.constants import DEFAULT_SEPARATOR
from linereader.domain.errors import ExhaustionError
from linereader.infra.source import ByteSource, FileByteSource, PathLike

logger = logging.getLogger(__name__)


class ReaderState(enum.Enum):
    IDLE = "idle"
    FILLING = "filling"
    HAS_LINE = "has_line"
    CLOSED = "closed"


class AsyncLineReader:
    """
    Awaitable reader over one byte source.

    Build instances with 'await AsyncLineReader.open(path)' (or
    'await AsyncLineReader.create(source)'), which runs the initial
    fill-until-separator sequence before handing the reader out.
    """

    def __init__(self, source: ByteSource, options: Any = None) -> None:
        opts, _ = validate_options(options, strict=True, separator_default=DEFAULT_SEPARATOR)
        self.options = opts
        self._buffer = LineBuffer(source, build_separator(opts.separator), opts)
        self._lock = anyio.Lock()
        self._closed = False
        self.state = ReaderState.IDLE

    @classmethod
    async def create(cls, source: ByteSource, options: Any = None) -> "AsyncLineReader":
        """Wrap an opened byte source and prime the first line."""
        try:
            reader = cls(source, options)
        except BaseException:
            source.close()
            raise

        try:
            async with reader._lock:
                await reader._read_to_separator()
        except BaseException:
            await reader.aclose()
            raise
        return reader

    @classmethod
    async def open(cls, path: PathLike, options: Any = None) -> "AsyncLineReader":
        """Open 'path' off the event loop and return a primed reader."""
        source = await anyio.to_thread.run_sync(FileByteSource.open, path)
        return await cls.create(source, options)

    # -------------------------------------------------------------------------
    # LINE API
    # -------------------------------------------------------------------------

    def has_next_line(self) -> bool:
        return self._buffer.has_next_line()

    async def next_line(self) -> str:
        """
        Deliver the next line, filling chunks as needed.

        Raises:
            ExhaustionError: If every line has already been delivered.
            ResourceError: If the byte source fails while filling.
        """
        async with self._lock:
            if not self.has_next_line():
                raise ExhaustionError()

            buf = self._buffer
            while not buf.line_ready():
                await self._read_to_separator()
            line = buf.take_line()

            # A separator that ended the last chunk says nothing about what follows it
            while buf.at_chunk_edge():
                await self._fill()
            self._settle()
            return line

    @property
    def closed(self) -> bool:
        return self._closed or self._buffer.source.closed

    async def aclose(self) -> None:
        """Close the byte source. Safe to call repeatedly."""
        self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.state = ReaderState.CLOSED
        self._buffer.close_source()
        logger.debug(f"Async reader closed at byte {self._buffer.position}.")

    # -------------------------------------------------------------------------
    # INTERNAL FILL LOOP
    # -------------------------------------------------------------------------

    async def _fill(self) -> int:
        buf = self._buffer
        buf.ensure_fillable()
        self.state = ReaderState.FILLING
        bytes_read = await anyio.to_thread.run_sync(
            buf.source.read, buf.chunk, 0, buf.capacity, buf.position
        )
        return buf.ingest(bytes_read)

    async def _read_to_separator(self) -> None:
        """Fill chunks, one suspension per chunk, until a separator or eof."""
        buf = self._buffer
        while not buf.eof:
            bytes_read = await self._fill()
            if not bytes_read or buf.scan() is not None:
                break
        self._settle()

    def _settle(self) -> None:
        if self._closed or not self._buffer.has_next_line():
            self.state = ReaderState.CLOSED
        elif self._buffer.line_ready() and self._buffer.has_next_line():
            self.state = ReaderState.HAS_LINE
        else:
            self.state = ReaderState.IDLE

    # -------------------------------------------------------------------------
    # PROTOCOLS
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "AsyncLineReader":
        return self

    async def __aexit__(self, exc_type: Optional[type], exc: Optional[BaseException], tb: Any) -> None:
        await self.aclose()

    async def __aiter__(self) -> AsyncIterator[str]:
        while self.has_next_line():
            yield await self.next_line()
