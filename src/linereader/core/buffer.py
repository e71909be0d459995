from __future__ import annotations

"""
Decoded Accumulator and Chunk Filler.

Holds the per-reader mutable state shared by the blocking and cooperative
line sources: the reusable chunk, the byte position cursor, the streaming
decoder, the pending decoded text, the cached separator locus and the
end-of-input flag. Readers differ only in how they wait for the byte source;
everything that happens once bytes are available lives here.

Decoded text is kept as a list of pieces and only joined when a line is cut,
so a line spanning many chunks is copied once instead of once per fill.
"""

import codecs
import logging
from typing import List, Optional

from linereader.core.scanner import Match, Separator
from linereader.domain.errors import ExhaustionError
from linereader.domain.options import ReaderOptions
from linereader.infra.source import ByteSource

logger = logging.getLogger(__name__)


class LineBuffer:
    """
    Single-chunk decoding buffer bound to one byte source.

    Attributes:
        source: Byte source the chunks are read from. Closed on end-of-input.
        separator: Strategy used to locate line boundaries.
        chunk: Fixed-capacity buffer reused by every read.
        position: Byte offset of the next read.
        eof: Set once a read returns fewer bytes than the chunk capacity.
    """

    def __init__(self, source: ByteSource, separator: Separator, options: ReaderOptions) -> None:
        self.source = source
        self.separator = separator
        self.capacity = options.buffer_size
        self.chunk = bytearray(self.capacity)
        self.position = 0
        self.eof = False
        self._parts: List[str] = []
        self._size = 0
        # Length of the pending prefix already searched without a hit
        self._searched = 0
        self._locus: Optional[Match] = None
        self._decoder = codecs.getincrementaldecoder(options.encoding)(errors=options.decode_errors)

    @property
    def pending(self) -> str:
        """Decoded text not yet delivered as part of a line."""
        if len(self._parts) > 1:
            self._parts = ["".join(self._parts)]
        return self._parts[0] if self._parts else ""

    # -------------------------------------------------------------------------
    # CHUNK FILLING
    # -------------------------------------------------------------------------

    def ensure_fillable(self) -> None:
        """Reject a fill once the source has reported end-of-input."""
        if self.eof:
            raise ExhaustionError("Cannot read past the end of the byte source.")

    def fill(self) -> int:
        """
        Read, decode and append one chunk, blocking the calling thread.

        Returns:
            int: Number of bytes read from the source.
        """
        self.ensure_fillable()
        bytes_read = self.source.read(self.chunk, 0, self.capacity, self.position)
        return self.ingest(bytes_read)

    def ingest(self, bytes_read: int) -> int:
        """
        Account for a completed read of 'bytes_read' bytes into the chunk.

        Advances the position cursor, feeds the decoder and closes the source
        the moment end-of-input is observed.
        """
        self.position += bytes_read
        if bytes_read < self.capacity:
            self.eof = True

        # The decoder is flushed at eof so a truncated sequence hits its error policy
        text = self._decoder.decode(bytes(self.chunk[:bytes_read]), final=self.eof)
        if text:
            self._parts.append(text)
            self._size += len(text)

        if self.eof:
            logger.debug(f"End of input after {self.position} bytes; closing source.")
            self.close_source()
        return bytes_read

    # -------------------------------------------------------------------------
    # SEPARATOR BOOKKEEPING
    # -------------------------------------------------------------------------

    def scan(self) -> Optional[Match]:
        """Return the cached separator locus, scanning the pending text if unknown."""
        if self._locus is None:
            self._locus = self._search()
        return self._locus

    def line_ready(self) -> bool:
        """True when a line can be cut without further reads."""
        return self.scan() is not None or self.eof

    def at_chunk_edge(self) -> bool:
        """
        True when every decoded character has been delivered but end-of-input
        is still unknown. Another fill is needed to tell whether a line follows.
        """
        return self._size == 0 and not self.eof

    def take_line(self) -> str:
        """
        Remove and return the next line from the pending text.

        Without a separator locus, the line is the whole remainder (forced
        final line); that is only legal once end-of-input has been reached.
        """
        locus = self.scan()
        text = self.pending
        if locus is None:
            if not self.eof:
                raise RuntimeError("take_line() called before a line boundary was known.")
            line, rest = text, ""
        else:
            line = text[:locus.index]
            rest = text[locus.index + locus.length:]

        self._parts = [rest] if rest else []
        self._size = len(rest)
        self._searched = 0
        self._locus = None
        return line

    def close_source(self) -> None:
        """Close the byte source unless it is already closed."""
        if not self.source.closed:
            self.source.close()

    def has_next_line(self) -> bool:
        """True while undelivered text remains or the source may yield more."""
        return self._size > 0 or not self.eof

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _search(self) -> Optional[Match]:
        lookbehind = self.separator.lookbehind
        if lookbehind is None:
            return self.separator.find(self.pending, self.eof)

        start = max(0, self._searched - lookbehind)
        found = self.separator.find(self._tail(start), self.eof)
        if found is None:
            self._searched = self._size
            return None
        return Match(start + found.index, found.length)

    def _tail(self, start: int) -> str:
        """Pending text from 'start' onwards, joining only the pieces it spans."""
        wanted = self._size - start
        pieces: List[str] = []
        covered = 0
        for part in reversed(self._parts):
            if covered >= wanted:
                break
            pieces.append(part)
            covered += len(part)
        pieces.reverse()
        text = "".join(pieces)
        return text[len(text) - wanted:]
