from __future__ import annotations

"""
Line Reader Error Taxonomy.

Every failure raised by this package derives from LineReaderError so callers
can trap the whole family at once, while the secondary bases keep the
exceptions catchable with the builtin types they specialize.
"""

from typing import Optional


class LineReaderError(Exception):
    """Base class for all line reader failures."""


class ResourceError(LineReaderError, OSError):
    """
    Open, read or close failure on the underlying byte source.

    Never retried. The originating OSError is chained as __cause__ and its
    errno/filename are preserved on this instance.
    """

    def __init__(
            self,
            message: str,
            *,
            errno: Optional[int] = None,
            filename: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.errno = errno
        self.filename = filename
        self.strerror = message

    def __str__(self) -> str:
        return self.strerror or ""

    @classmethod
    def wrap(cls, action: str, exc: OSError, filename: Optional[str] = None) -> "ResourceError":
        """Build a ResourceError describing a failed byte-source action."""
        target = filename or getattr(exc, "filename", None)
        reason = exc.strerror or str(exc)
        return cls(f"Failed to {action} '{target}': {reason}", errno=exc.errno, filename=target)


class ExhaustionError(LineReaderError, LookupError):
    """A line was requested when the source had no line left to deliver."""

    def __init__(self, message: str = "No more lines to read.") -> None:
        super().__init__(message)
