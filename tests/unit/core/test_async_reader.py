from __future__ import annotations

"""
Unit tests for the Cooperative Line Source.

Verifies:
1. Priming on creation and line delivery across chunk boundaries.
2. State transitions.
3. Exhaustion, resource failures and close discipline.
4. Sequential fills under concurrent callers.
"""

import re

import anyio
import pytest

from linereader.core.reader_async import AsyncLineReader, ReaderState
from linereader.domain.errors import ExhaustionError, ResourceError

pytestmark = pytest.mark.anyio


async def _read_all(reader: AsyncLineReader):
    lines = []
    while reader.has_next_line():
        line = await reader.next_line()
        lines.append((line, not reader.has_next_line()))
    return lines


async def test_concrete_scenario_small_chunks(memory_source) -> None:
    reader = await AsyncLineReader.create(memory_source("a\nb\nc"), {"separator": "\n", "buffer_size": 2})

    assert await _read_all(reader) == [("a", False), ("b", False), ("c", True)]


async def test_creation_primes_first_line(memory_source) -> None:
    src = memory_source("abc\ndef\nghi")
    reader = await AsyncLineReader.create(src, {"buffer_size": 2})

    # 'abc\n' needs two 2-byte chunks before the first separator is visible
    assert src.reads == [0, 2]
    assert reader.state is ReaderState.HAS_LINE


async def test_default_separator_is_plain_newline(memory_source) -> None:
    reader = await AsyncLineReader.create(memory_source("a\r\nb"))

    assert [line for line, _ in await _read_all(reader)] == ["a\r", "b"]


async def test_pattern_separator_straddling_boundary(memory_source) -> None:
    reader = await AsyncLineReader.create(
        memory_source("ab\r\ncd"),
        {"separator": re.compile(r"\r\n|\r|\n"), "buffer_size": 4},
    )

    assert await _read_all(reader) == [("ab", False), ("cd", True)]


async def test_literal_separator_straddling_boundary(memory_source) -> None:
    reader = await AsyncLineReader.create(memory_source("ab\r\ncd"), {"separator": "\r\n", "buffer_size": 3})

    assert await _read_all(reader) == [("ab", False), ("cd", True)]


async def test_empty_input(memory_source) -> None:
    src = memory_source("")
    reader = await AsyncLineReader.create(src)

    assert reader.has_next_line() is False
    assert reader.state is ReaderState.CLOSED
    assert src.close_calls == 1


async def test_async_iteration_protocol(memory_source) -> None:
    reader = await AsyncLineReader.create(memory_source("x|y|z"), {"separator": "|", "buffer_size": 1})

    assert [line async for line in reader] == ["x", "y", "z"]


async def test_exhaustion_raises(memory_source) -> None:
    reader = await AsyncLineReader.create(memory_source("one"))
    assert await reader.next_line() == "one"

    with pytest.raises(ExhaustionError):
        await reader.next_line()


async def test_read_failure_during_priming_closes_source(memory_source) -> None:
    src = memory_source("abc", fail_at_read=0)

    with pytest.raises(ResourceError):
        await AsyncLineReader.create(src)
    assert src.close_calls == 1


async def test_async_context_manager_closes_once(memory_source) -> None:
    src = memory_source("a\n" * 50)
    async with await AsyncLineReader.create(src, {"buffer_size": 4}) as reader:
        assert await reader.next_line() == "a"
        await reader.aclose()

    assert src.close_calls == 1
    assert reader.state is ReaderState.CLOSED


async def test_concurrent_callers_never_overlap_fills(memory_source) -> None:
    content = "\n".join(f"line{i}" for i in range(40))
    src = memory_source(content)
    reader = await AsyncLineReader.create(src, {"buffer_size": 3})
    received = []

    async def worker() -> None:
        while reader.has_next_line():
            try:
                received.append(await reader.next_line())
            except ExhaustionError:
                return

    async with anyio.create_task_group() as tg:
        for _ in range(4):
            tg.start_soon(worker)

    # Reads are strictly sequential: every position follows the previous chunk
    assert src.reads == list(range(0, len(src.reads) * 3, 3))
    assert sorted(received, key=lambda s: int(s[4:])) == content.split("\n")


async def test_open_real_file(make_file) -> None:
    path = make_file("first\nsecond")
    reader = await AsyncLineReader.open(path, {"buffer_size": 4})

    assert await _read_all(reader) == [("first", False), ("second", True)]
    assert reader.closed is True


async def test_open_missing_file(tmp_path) -> None:
    with pytest.raises(ResourceError):
        await AsyncLineReader.open(tmp_path / "nope.txt")


@pytest.mark.parametrize("trailing", [False, True])
@pytest.mark.parametrize("length_delta", [-1, 0, 1])
@pytest.mark.parametrize("separator", ["\n", "--", re.compile(r"\r?\n")])
async def test_round_trip_around_chunk_multiples(chunk_aligned_content, memory_source, separator,
                                                 length_delta: int, trailing: bool) -> None:
    chunk = 8
    glue = separator if isinstance(separator, str) else "\n"
    content, expected = chunk_aligned_content(glue, chunk, length_delta, trailing)

    reader = await AsyncLineReader.create(memory_source(content), {"separator": separator, "buffer_size": chunk})
    lines = await _read_all(reader)

    assert [line for line, _ in lines] == expected
    assert [last for _, last in lines] == [False] * (len(expected) - 1) + [True]


async def test_separator_ending_a_full_chunk_is_not_followed_by_empty_line(memory_source) -> None:
    src = memory_source("ab\ncd\n")
    reader = await AsyncLineReader.create(src, {"buffer_size": 3})

    assert await reader.next_line() == "ab"
    assert reader.state is ReaderState.HAS_LINE
    assert await _read_all(reader) == [("cd", True)]
    assert reader.state is ReaderState.CLOSED
    assert src.close_calls == 1
