from __future__ import annotations

"""
Smoke tests for the package-level public API.
"""

import pytest

import linereader


def test_public_api_contract():
    for name in linereader.__all__:
        assert hasattr(linereader, name), f"linereader missing: {name}"


def test_open_sync_reads_file(make_file):
    path = make_file("one\r\ntwo\rthree")

    with linereader.open_sync(path, {"buffer_size": 3}) as reader:
        assert list(reader) == ["one", "two", "three"]
    assert reader.closed is True


@pytest.mark.anyio
async def test_open_reads_file(make_file):
    path = make_file("one\ntwo\n")

    reader = await linereader.open(path, linereader.ReaderOptions(buffer_size=5))
    assert [line async for line in reader] == ["one", "two"]
