from __future__ import annotations

"""
Unit tests for the Separator Scanning Strategies.

Verifies:
1. Literal lookup and fixed match length.
2. Pattern lookup with per-match length.
3. The ambiguous trailing match rule for patterns.
4. Factory dispatch and construction guards.
"""

import re

import pytest

from linereader.core.scanner import (
    LiteralSeparator,
    Match,
    PatternSeparator,
    build_separator,
)


# -----------------------------------------------------------------------------
# LITERAL SEPARATOR
# -----------------------------------------------------------------------------

def test_literal_finds_first_occurrence() -> None:
    sep = LiteralSeparator("\n")
    assert sep.find("a\nb\nc", eof=False) == Match(1, 1)


def test_literal_multichar_length() -> None:
    sep = LiteralSeparator("\r\n")
    assert sep.find("ab\r\ncd", eof=False) == Match(2, 2)


def test_literal_partial_separator_is_not_found() -> None:
    """Only the first half of '\\r\\n' has been decoded so far."""
    sep = LiteralSeparator("\r\n")
    assert sep.find("ab\r", eof=False) is None


def test_literal_at_end_of_text_is_accepted() -> None:
    """Literal separators are never ambiguous: their length is fixed."""
    sep = LiteralSeparator("\n")
    assert sep.find("abc\n", eof=False) == Match(3, 1)


def test_literal_rejects_empty() -> None:
    with pytest.raises(ValueError):
        LiteralSeparator("")


# -----------------------------------------------------------------------------
# PATTERN SEPARATOR
# -----------------------------------------------------------------------------

def test_pattern_match_length_varies() -> None:
    sep = PatternSeparator(re.compile(r"\r\n|\n"))
    assert sep.find("x\r\ny\nz", eof=False) == Match(1, 2)
    assert sep.find("y\nz", eof=False) == Match(1, 1)


def test_pattern_match_ending_at_buffer_end_is_ambiguous() -> None:
    """A trailing '\\r' could still become '\\r\\n' once more input arrives."""
    sep = PatternSeparator(re.compile(r"\r\n|\r|\n"))
    assert sep.find("ab\r", eof=False) is None


def test_pattern_match_ending_at_buffer_end_accepted_at_eof() -> None:
    sep = PatternSeparator(re.compile(r"\r\n|\r|\n"))
    assert sep.find("ab\r", eof=True) == Match(2, 1)


def test_pattern_no_match() -> None:
    sep = PatternSeparator(re.compile(r";+"))
    assert sep.find("abc", eof=True) is None


def test_pattern_zero_length_match_is_rejected() -> None:
    sep = PatternSeparator(re.compile(r",*"))
    with pytest.raises(ValueError, match="empty string"):
        sep.find("abc", eof=False)


# -----------------------------------------------------------------------------
# FACTORY
# -----------------------------------------------------------------------------

def test_build_separator_dispatch() -> None:
    assert isinstance(build_separator("--"), LiteralSeparator)
    assert isinstance(build_separator(re.compile("-+")), PatternSeparator)


def test_build_separator_rejects_other_types() -> None:
    with pytest.raises(TypeError):
        build_separator(42)  # type: ignore[arg-type]
