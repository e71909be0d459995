from __future__ import annotations

"""
Unit tests for the Line Reader Error Taxonomy.
"""

import errno

from linereader.domain.errors import ExhaustionError, LineReaderError, ResourceError


def test_resource_error_is_an_os_error() -> None:
    err = ResourceError("boom", errno=errno.EIO, filename="data.txt")

    assert isinstance(err, LineReaderError)
    assert isinstance(err, OSError)
    assert err.errno == errno.EIO
    assert err.filename == "data.txt"
    assert str(err) == "boom"


def test_resource_error_wrap_preserves_origin() -> None:
    origin = FileNotFoundError(errno.ENOENT, "No such file or directory", "missing.txt")
    err = ResourceError.wrap("open", origin)

    assert err.errno == errno.ENOENT
    assert err.filename == "missing.txt"
    assert "Failed to open 'missing.txt'" in str(err)


def test_exhaustion_error_is_a_lookup_error() -> None:
    err = ExhaustionError()

    assert isinstance(err, LineReaderError)
    assert isinstance(err, LookupError)
    assert str(err) == "No more lines to read."
