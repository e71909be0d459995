from __future__ import annotations

"""
Byte Source Infrastructure Layer.

Provides the positional, read-only byte source consumed by the line readers.
Acts as the single boundary with the operating system: every OSError raised
while opening, reading or closing a file is translated into ResourceError.
"""

import logging
import os
from typing import BinaryIO, Optional, Protocol, Union

from linereader.domain.errors import ResourceError

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


# -----------------------------------------------------------------------------
# CAPABILITY CONTRACT
# -----------------------------------------------------------------------------

class ByteSource(Protocol):
    """Positional byte source capability required by the line buffer."""

    closed: bool

    def read(self, buffer: bytearray, offset: int, length: int, position: int) -> int:
        """Copy up to 'length' bytes read at 'position' into buffer[offset:]."""
        ...

    def close(self) -> None:
        """Release the underlying resource. Must be idempotent."""
        ...


# -----------------------------------------------------------------------------
# FILE IMPLEMENTATION
# -----------------------------------------------------------------------------

class FileByteSource:
    """
    Read-only file handle addressed by absolute byte position.

    Every read seeks to the requested position first, so the handle carries no
    implicit cursor of its own; the caller owns the position.
    """

    def __init__(self, handle: BinaryIO, name: str) -> None:
        self._handle: Optional[BinaryIO] = handle
        self.name = name
        self.closed = False

    @classmethod
    def open(cls, path: PathLike) -> "FileByteSource":
        """
        Open a file for positional binary reads.

        Args:
            path: Filesystem path of the resource.

        Returns:
            FileByteSource: The opened source.

        Raises:
            ResourceError: If the file is missing, unreadable or a directory.
        """
        name = os.fspath(path)
        try:
            handle = open(name, "rb", buffering=0)
        except OSError as e:
            raise ResourceError.wrap("open", e, name) from e

        logger.debug(f"Opened byte source '{name}'.")
        return cls(handle, name)

    def read(self, buffer: bytearray, offset: int, length: int, position: int) -> int:
        if self._handle is None:
            raise ResourceError(f"Cannot read from closed source '{self.name}'.", filename=self.name)

        view = memoryview(buffer)[offset:offset + length]
        try:
            self._handle.seek(position)
            total = 0
            # Raw reads may come back short before the end of the file
            while total < len(view):
                n = self._handle.readinto(view[total:])
                if not n:
                    break
                total += n
            return total
        except OSError as e:
            raise ResourceError.wrap("read", e, self.name) from e

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.close()
        except OSError as e:
            raise ResourceError.wrap("close", e, self.name) from e
        logger.debug(f"Closed byte source '{self.name}'.")

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<FileByteSource {self.name!r} {state}>"
