from __future__ import annotations

"""
linereader: incremental, memory-bounded line splitting for large files.

Public API:
    open / AsyncLineReader      cooperative (anyio) line source
    open_sync / SyncLineReader  blocking line source
    each_line                   asynchronous per-line traversal
    each_line_sync              blocking per-line traversal
"""

from linereader.core.iteration import LineIteration, each_line, each_line_sync
from linereader.core.reader_async import AsyncLineReader, ReaderState
from linereader.core.reader_sync import SyncLineReader
from linereader.core.scanner import LiteralSeparator, PatternSeparator, build_separator
from linereader.domain.errors import ExhaustionError, LineReaderError, ResourceError
from linereader.domain.options import ReaderOptions
from linereader.infra.source import FileByteSource, PathLike

__version__ = "0.1.0"


async def open(path: PathLike, options: object = None) -> AsyncLineReader:
    """Open 'path' and return a primed cooperative line reader."""
    return await AsyncLineReader.open(path, options)


def open_sync(path: PathLike, options: object = None) -> SyncLineReader:
    """Open 'path' and return a primed blocking line reader."""
    return SyncLineReader.open(path, options)


__all__ = [
    "AsyncLineReader",
    "ExhaustionError",
    "FileByteSource",
    "LineIteration",
    "LineReaderError",
    "LiteralSeparator",
    "PatternSeparator",
    "ReaderOptions",
    "ReaderState",
    "ResourceError",
    "SyncLineReader",
    "build_separator",
    "each_line",
    "each_line_sync",
    "open",
    "open_sync",
]
