from __future__ import annotations

"""
Reader Option Validation Service.

Gatekeeper between untrusted configuration (CLI flags, plain dictionaries
written by callers) and the line sources. Handles type coercion, key
aliasing and default injection so that readers only ever see a well-formed
ReaderOptions instance.
"""

import codecs
import logging
import re
from dataclasses import fields
from typing import Any, Dict, List, Mapping, Optional, Tuple

from linereader.domain.constants import (
    CLI_ESCAPES,
    DEFAULT_BUFFER_SIZE,
    DEFAULT_DECODE_ERRORS,
    DEFAULT_ENCODING,
    DEFAULT_SEPARATOR,
    SUPPORTED_DECODE_ERRORS,
)
from linereader.domain.options import ReaderOptions, SeparatorSpec

logger = logging.getLogger(__name__)

# Accepted spellings for every option key
_KEY_ALIASES: Dict[str, str] = {
    "separator": "separator",
    "encoding": "encoding",
    "buffer_size": "buffer_size",
    "bufferSize": "buffer_size",
    "decode_errors": "decode_errors",
    "decodeErrors": "decode_errors",
    "regex": "regex",
}


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_options(
        options: Any,
        *,
        strict: bool = False,
        separator_default: SeparatorSpec = DEFAULT_SEPARATOR,
) -> Tuple[ReaderOptions, List[str]]:
    """
    Validate and normalize reader construction options.

    Args:
        options: None, a ReaderOptions instance or a mapping of option keys.
        strict: If True, raise on invalid values instead of coercing them.
        separator_default: Separator used when none is supplied.

    Returns:
        Tuple[ReaderOptions, List[str]]: Normalized options and warnings.
    """
    warnings: List[str] = []

    if options is None:
        return ReaderOptions(separator=separator_default), warnings

    if isinstance(options, ReaderOptions):
        raw: Dict[str, Any] = {f.name: getattr(options, f.name) for f in fields(options)}
    elif isinstance(options, Mapping):
        raw = _normalize_keys(options, warnings, strict)
    else:
        msg = f"Invalid options type: expected mapping, received {type(options).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return ReaderOptions(separator=separator_default), warnings

    regex = _as_bool(raw.get("regex"), False, "regex", warnings, strict)
    separator = _as_separator(raw.get("separator"), separator_default, regex, warnings, strict)
    encoding = _as_encoding(raw.get("encoding"), warnings, strict)
    buffer_size = _as_buffer_size(raw.get("buffer_size"), warnings, strict)
    decode_errors = _as_decode_errors(raw.get("decode_errors"), warnings, strict)

    for w in warnings:
        logger.warning(f"Reader option constraint: {w}")

    return ReaderOptions(
        separator=separator,
        encoding=encoding,
        buffer_size=buffer_size,
        decode_errors=decode_errors,
        regex=regex,
    ), warnings


def decode_cli_escapes(value: str) -> str:
    """Translate backslash escapes typed on a terminal into real characters."""
    out = value
    for escape, char in CLI_ESCAPES.items():
        out = out.replace(escape, char)
    return out


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: KEY NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_keys(options: Mapping[str, Any], warnings: List[str], strict: bool) -> Dict[str, Any]:
    """Map camelCase/snake_case aliases onto canonical field names."""
    out: Dict[str, Any] = {}
    for key, value in options.items():
        canonical = _KEY_ALIASES.get(str(key))
        if canonical is None:
            msg = f"Unknown reader option '{key}'."
            if strict:
                raise ValueError(msg)
            warnings.append(f"{msg} Ignored.")
            continue
        out[canonical] = value
    return out


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_separator(
        value: Any,
        fallback: SeparatorSpec,
        regex: bool,
        warnings: List[str],
        strict: bool,
) -> SeparatorSpec:
    """Validate a literal or pattern separator, compiling it when requested."""
    if value is None:
        return fallback

    if isinstance(value, re.Pattern):
        if not isinstance(value.pattern, str):
            return _reject("separator", "bytes pattern", fallback, warnings, strict)
        return value

    if not isinstance(value, str):
        return _reject("separator", type(value).__name__, fallback, warnings, strict)

    if value == "":
        msg = "Invalid field 'separator': must not be empty."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    if not regex:
        return value

    try:
        return re.compile(value)
    except re.error as e:
        msg = f"Invalid field 'separator': bad regular expression ({e})."
        if strict:
            raise ValueError(msg) from e
        warnings.append(f"{msg} Using fallback.")
        return fallback


def _as_encoding(value: Any, warnings: List[str], strict: bool) -> str:
    """Ensure the encoding names a codec with an incremental decoder."""
    if value is None:
        return DEFAULT_ENCODING
    if not isinstance(value, str) or not value.strip():
        return _reject("encoding", type(value).__name__, DEFAULT_ENCODING, warnings, strict)

    name = value.strip()
    try:
        codecs.getincrementaldecoder(name)
    except LookupError as e:
        msg = f"Invalid field 'encoding': unknown codec '{name}'."
        if strict:
            raise ValueError(msg) from e
        warnings.append(f"{msg} Using fallback.")
        return DEFAULT_ENCODING
    return name


def _as_buffer_size(value: Any, warnings: List[str], strict: bool) -> int:
    """Ensure the chunk capacity is a positive integer."""
    if value is None:
        return DEFAULT_BUFFER_SIZE

    if isinstance(value, bool):
        return _reject("buffer_size", "bool", DEFAULT_BUFFER_SIZE, warnings, strict)

    size: Optional[int] = None
    if isinstance(value, int):
        size = value
    elif not strict and isinstance(value, str) and value.strip().isdigit():
        size = int(value.strip())
        warnings.append(f"Field 'buffer_size' converted from '{value}' to {size}.")

    if size is None:
        return _reject("buffer_size", type(value).__name__, DEFAULT_BUFFER_SIZE, warnings, strict)

    if size <= 0:
        msg = f"Invalid field 'buffer_size': must be positive, received {size}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return DEFAULT_BUFFER_SIZE
    return size


def _as_decode_errors(value: Any, warnings: List[str], strict: bool) -> str:
    """Restrict the decoder error policy to the handlers codecs ships with."""
    if value is None:
        return DEFAULT_DECODE_ERRORS
    if isinstance(value, str) and value.strip() in SUPPORTED_DECODE_ERRORS:
        return value.strip()

    msg = (
        f"Invalid field 'decode_errors': expected one of "
        f"{', '.join(SUPPORTED_DECODE_ERRORS)}, received {value!r}."
    )
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return DEFAULT_DECODE_ERRORS


def _reject(field: str, received: str, fallback: Any, warnings: List[str], strict: bool) -> Any:
    """Shared type-mismatch exit for scalar fields."""
    msg = f"Invalid field '{field}': unsupported value of type {received}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback
