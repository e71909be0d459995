from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. The anyio backend used by asynchronous tests.
3. File factories and an in-memory byte source with fault injection.
"""

import os
import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from linereader.domain.errors import ResourceError  # noqa: E402


# -----------------------------------------------------------------------------
# In-memory Byte Source
# -----------------------------------------------------------------------------
class MemoryByteSource:
    """
    Positional byte source over a bytes object.

    Records every read and counts close() calls so tests can assert the
    exactly-once close guarantee. 'fail_at_read' raises an OSError on the
    given (0-based) read call.
    """

    def __init__(self, data: bytes, fail_at_read: Optional[int] = None) -> None:
        self.data = data
        self.fail_at_read = fail_at_read
        self.reads: List[int] = []
        self.close_calls = 0
        self.closed = False

    def read(self, buffer: bytearray, offset: int, length: int, position: int) -> int:
        if self.fail_at_read is not None and len(self.reads) == self.fail_at_read:
            raise ResourceError("simulated read failure", filename="<memory>")
        self.reads.append(position)
        piece = self.data[position:position + length]
        buffer[offset:offset + len(piece)] = piece
        return len(piece)

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def anyio_backend() -> str:
    """Run asynchronous tests on the asyncio event loop."""
    return "asyncio"


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[[Union[str, bytes], str], Path]:
    """
    Return a factory writing content to a fresh file under tmp_path.

    Text content is encoded as UTF-8 without newline translation.
    """
    counter = {"n": 0}

    def _make(content: Union[str, bytes], name: str = "") -> Path:
        counter["n"] += 1
        path = tmp_path / (name or f"input_{counter['n']}.txt")
        data = content.encode("utf-8") if isinstance(content, str) else content
        path.write_bytes(data)
        return path

    return _make


@pytest.fixture
def memory_source() -> Callable[..., MemoryByteSource]:
    """Return a factory for in-memory byte sources."""
    def _make(content: Union[str, bytes], fail_at_read: Optional[int] = None) -> MemoryByteSource:
        data = content.encode("utf-8") if isinstance(content, str) else content
        return MemoryByteSource(data, fail_at_read=fail_at_read)

    return _make


@pytest.fixture
def chunk_aligned_content() -> Callable[..., Tuple[str, List[str]]]:
    """
    Return a factory building text whose UTF-8 length is a chunk multiple
    plus 'delta' bytes, together with the lines a single unbuffered pass
    over it yields. With 'trailing' the text ends in the separator.
    """
    words = ["alpha", "b", "", "gamma-delta", "é€", "z"]

    def _make(glue: str, chunk: int, delta: int, trailing: bool) -> Tuple[str, List[str]]:
        tail = glue if trailing else ""
        current = len((glue.join(words) + tail).encode("utf-8"))
        target = (current // chunk + 2) * chunk + delta
        lines = words[:-1] + [words[-1] + "x" * (target - current)]
        return glue.join(lines) + tail, lines

    return _make
