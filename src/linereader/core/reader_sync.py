from __future__ import annotations

"""
Blocking Line Source.

Reads a byte source chunk by chunk on the calling thread and cuts the
decoded text into lines. Every fill blocks until the operating system
returns; there is no suspension and no cooperative yielding.
"""

import logging
from typing import Any, Iterator, Optional

from linereader.core.buffer import LineBuffer
from linereader.core.scanner import build_separator
from linereader.core.validator import validate_options
from linereader.domain.constants import UNIVERSAL_NEWLINE
from linereader.domain.errors import ExhaustionError
from linereader.infra.source import ByteSource, FileByteSource, PathLike

logger = logging.getLogger(__name__)


class SyncLineReader:
    """
    Blocking reader over one byte source.

    The constructor performs the initial fill-until-separator sequence, so
    has_next_line() is meaningful as soon as the instance exists. Supports
    the context manager and iterator protocols.
    """

    def __init__(self, source: ByteSource, options: Any = None) -> None:
        opts, _ = validate_options(options, strict=True, separator_default=UNIVERSAL_NEWLINE)
        self.options = opts
        self._buffer = LineBuffer(source, build_separator(opts.separator), opts)
        self._closed = False
        try:
            self._read_to_separator()
        except BaseException:
            self.close()
            raise

    @classmethod
    def open(cls, path: PathLike, options: Any = None) -> "SyncLineReader":
        """Open 'path' and return a reader primed with its first line."""
        source = FileByteSource.open(path)
        try:
            return cls(source, options)
        except BaseException:
            source.close()
            raise

    # -------------------------------------------------------------------------
    # LINE API
    # -------------------------------------------------------------------------

    def has_next_line(self) -> bool:
        return self._buffer.has_next_line()

    def next_line(self) -> str:
        """
        Return the next line with its separator removed.

        Raises:
            ExhaustionError: If every line has already been delivered.
            ResourceError: If the byte source fails while filling.
        """
        if not self.has_next_line():
            raise ExhaustionError()

        buf = self._buffer
        while not buf.line_ready():
            self._read_to_separator()
        line = buf.take_line()

        # A separator that ended the last chunk says nothing about what follows it
        while buf.at_chunk_edge():
            buf.fill()
        return line

    @property
    def closed(self) -> bool:
        return self._closed or self._buffer.source.closed

    def close(self) -> None:
        """Close the byte source. Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True
        self._buffer.close_source()
        logger.debug(f"Sync reader closed at byte {self._buffer.position}.")

    # -------------------------------------------------------------------------
    # INTERNAL FILL LOOP
    # -------------------------------------------------------------------------

    def _read_to_separator(self) -> None:
        """Fill chunks until a separator is located or the source is exhausted."""
        buf = self._buffer
        while not buf.eof:
            bytes_read = buf.fill()
            if not bytes_read or buf.scan() is not None:
                break

    # -------------------------------------------------------------------------
    # PROTOCOLS
    # -------------------------------------------------------------------------

    def __enter__(self) -> "SyncLineReader":
        return self

    def __exit__(self, exc_type: Optional[type], exc: Optional[BaseException], tb: Any) -> None:
        self.close()

    def __iter__(self) -> Iterator[str]:
        while self.has_next_line():
            yield self.next_line()
