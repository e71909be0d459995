from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema of the 'linereader' tool and translates the
parsed namespace into a raw reader option mapping, which is then handed to
the option validator like any other untrusted input.
"""

import argparse
from typing import Any, Dict

from linereader.core.validator import decode_cli_escapes
from linereader.domain.constants import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_DECODE_ERRORS,
    DEFAULT_ENCODING,
    SUPPORTED_DECODE_ERRORS,
)

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the linereader CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="linereader",
        description="Split a file into lines incrementally, one chunk at a time.",
    )

    p.add_argument("path", help="File to read.")

    # --- Splitting ---
    p.add_argument(
        "-s", "--separator",
        default=None,
        help=r"Line separator. Escapes such as \n, \r\n and \t are understood. "
             r"Defaults to \n (async) or any newline convention (sync).",
    )
    p.add_argument(
        "-E", "--regex",
        action="store_true",
        help="Treat the separator as a regular expression.",
    )
    p.add_argument(
        "--encoding",
        default=DEFAULT_ENCODING,
        help=f"Text encoding of the file (default: {DEFAULT_ENCODING}).",
    )
    p.add_argument(
        "-b", "--buffer-size",
        dest="buffer_size",
        type=int,
        default=DEFAULT_BUFFER_SIZE,
        help=f"Chunk size in bytes (default: {DEFAULT_BUFFER_SIZE}).",
    )
    p.add_argument(
        "--decode-errors",
        dest="decode_errors",
        choices=SUPPORTED_DECODE_ERRORS,
        default=DEFAULT_DECODE_ERRORS,
        help=f"Policy for malformed byte sequences (default: {DEFAULT_DECODE_ERRORS}).",
    )

    # --- Execution Model ---
    p.add_argument(
        "--async",
        dest="use_async",
        action="store_true",
        help="Use the cooperative reader instead of the blocking one.",
    )
    p.add_argument(
        "-m", "--max-lines",
        dest="max_lines",
        type=int,
        default=None,
        help="Stop after this many lines.",
    )

    # --- Output ---
    output = p.add_mutually_exclusive_group()
    output.add_argument(
        "-n", "--number",
        action="store_true",
        help="Prefix every line with its 1-based number.",
    )
    output.add_argument(
        "-c", "--count",
        action="store_true",
        help="Print only the number of lines.",
    )
    output.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Emit one JSON object per line with 'index', 'line' and 'last'.",
    )

    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Write diagnostics to a rotating log file.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_options(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a reader option mapping.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Raw options for validate_options().
    """
    options: Dict[str, Any] = {
        "encoding": args.encoding,
        "buffer_size": args.buffer_size,
        "decode_errors": args.decode_errors,
        "regex": bool(args.regex),
    }

    if args.separator is not None:
        # Regex syntax already understands backslash escapes
        options["separator"] = args.separator if args.regex else decode_cli_escapes(args.separator)

    return options
