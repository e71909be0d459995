from __future__ import annotations

"""
Domain Constants.

Centralizes the default construction parameters shared by both line
sources, the CLI and the option validator.
"""

import re
from typing import Pattern, Tuple

# -----------------------------------------------------------------------------
# READER DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_ENCODING = "utf-8"
DEFAULT_BUFFER_SIZE = 1024
DEFAULT_DECODE_ERRORS = "replace"

# Cooperative reader splits on a plain newline
DEFAULT_SEPARATOR = "\n"

# Blocking reader understands every newline convention
UNIVERSAL_NEWLINE: Pattern[str] = re.compile(r"\r\n|\r|\n")

SUPPORTED_DECODE_ERRORS: Tuple[str, ...] = (
    "strict",
    "replace",
    "ignore",
    "backslashreplace",
    "surrogateescape",
)

# Escapes understood when a separator is typed on the command line
CLI_ESCAPES = {
    "\\r": "\r",
    "\\n": "\n",
    "\\t": "\t",
    "\\0": "\0",
}
