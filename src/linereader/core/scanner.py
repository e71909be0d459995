from __future__ import annotations

"""
Separator Scanning Strategies.

Locates the next separator occurrence inside the decoded accumulator. Both
line sources depend only on the Separator interface, so a literal string and
a regular expression are interchangeable wherever a separator is expected.
"""

import re
from abc import ABC, abstractmethod
from typing import NamedTuple, Optional, Pattern

from linereader.domain.options import SeparatorSpec


class Match(NamedTuple):
    """Location of a separator: start index and matched length."""
    index: int
    length: int


# -----------------------------------------------------------------------------
# STRATEGY INTERFACE
# -----------------------------------------------------------------------------

class Separator(ABC):
    """Find-next-boundary capability shared by every separator kind."""

    # Already-searched characters a resumed search must revisit (None: all of them)
    lookbehind: Optional[int] = None

    @abstractmethod
    def find(self, text: str, eof: bool) -> Optional[Match]:
        """
        Locate the first separator in text.

        Args:
            text: Pending decoded content.
            eof: Whether the byte source has been exhausted.

        Returns:
            Optional[Match]: The separator position, or None if more input
                             is needed (or, at eof, if none exists).
        """


# -----------------------------------------------------------------------------
# CONCRETE STRATEGIES
# -----------------------------------------------------------------------------

class LiteralSeparator(Separator):
    """Fixed string separator located with str.find."""

    def __init__(self, literal: str) -> None:
        if not literal:
            raise ValueError("Literal separator must not be empty.")
        self.literal = literal
        self.lookbehind = len(literal) - 1

    def find(self, text: str, eof: bool) -> Optional[Match]:
        index = text.find(self.literal)
        if index < 0:
            return None
        return Match(index, len(self.literal))

    def __repr__(self) -> str:
        return f"LiteralSeparator({self.literal!r})"


class PatternSeparator(Separator):
    """
    Regular expression separator with a per-match length.

    A match that ends exactly at the end of the available text is ambiguous:
    the separator could continue in bytes not yet read (a lone '\\r' may be
    the first half of '\\r\\n'). Such a match is reported as not found until
    end-of-input makes it final.
    """

    def __init__(self, pattern: Pattern[str]) -> None:
        self.pattern = pattern

    def find(self, text: str, eof: bool) -> Optional[Match]:
        found = self.pattern.search(text)
        if found is None:
            return None

        start, end = found.span()
        if end == start:
            raise ValueError(
                f"Separator pattern {self.pattern.pattern!r} matched an empty string."
            )
        if end == len(text) and not eof:
            return None
        return Match(start, end - start)

    def __repr__(self) -> str:
        return f"PatternSeparator({self.pattern.pattern!r})"


# -----------------------------------------------------------------------------
# FACTORY
# -----------------------------------------------------------------------------

def build_separator(spec: SeparatorSpec) -> Separator:
    """Select the scanning strategy matching the separator specification."""
    if isinstance(spec, re.Pattern):
        return PatternSeparator(spec)
    if isinstance(spec, str):
        return LiteralSeparator(spec)
    raise TypeError(f"Unsupported separator type: {type(spec).__name__}")
