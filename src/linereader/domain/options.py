from __future__ import annotations

"""
Reader Configuration Model.

Defines the immutable construction parameters of a line source. Instances
are normally produced by 'linereader.core.validator.validate_options', which
coerces untrusted input (CLI flags, plain dictionaries) into this shape.
"""

from dataclasses import dataclass
from typing import Optional, Pattern, Union

from linereader.domain.constants import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_DECODE_ERRORS,
    DEFAULT_ENCODING,
)

SeparatorSpec = Union[str, Pattern[str]]


@dataclass(frozen=True)
class ReaderOptions:
    """
    Immutable specification of a line source.

    Attributes:
        separator: Literal separator text or a compiled regular expression.
            None selects the default of the reader it is handed to.
        encoding: Codec used by the streaming decoder.
        buffer_size: Chunk capacity in bytes for every read.
        decode_errors: Error policy handed to the decoder.
        regex: Compile a string separator as a regular expression.
    """
    separator: Optional[SeparatorSpec] = None
    encoding: str = DEFAULT_ENCODING
    buffer_size: int = DEFAULT_BUFFER_SIZE
    decode_errors: str = DEFAULT_DECODE_ERRORS
    regex: bool = False