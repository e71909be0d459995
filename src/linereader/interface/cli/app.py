from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, option validation, line
traversal through either iteration driver, and output rendering.
"""

import argparse
import errno
import json
import sys
from typing import Any, Dict, List, Optional, TextIO

import anyio

from linereader.core.iteration import each_line, each_line_sync
from linereader.core.validator import validate_options
from linereader.domain.constants import DEFAULT_SEPARATOR, UNIVERSAL_NEWLINE
from linereader.domain.errors import LineReaderError, ResourceError
from linereader.infra.logging import LoggingConfig, configure_logging, get_logger, shutdown_logging
from linereader.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.
        out: Stream receiving the rendered lines. Defaults to sys.stdout.

    Returns:
        int: Process exit code (0 success, 1 read failure, 2 usage error).
    """
    out = out or sys.stdout

    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.debug else "WARNING"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))
    try:
        return _execute(args, out)
    finally:
        shutdown_logging()


def _execute(args: argparse.Namespace, out: TextIO) -> int:
    """Validate options, traverse the file and render the result."""
    separator_default = DEFAULT_SEPARATOR if args.use_async else UNIVERSAL_NEWLINE
    try:
        options, _ = validate_options(
            cli_args.args_to_options(args),
            strict=True,
            separator_default=separator_default,
        )
    except (TypeError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    if args.max_lines is not None and args.max_lines < 0:
        print("ERROR: --max-lines must not be negative.", file=sys.stderr)
        return 2

    renderer = _LineRenderer(out, numbered=args.number, as_json=args.json_output,
                             count_only=args.count, limit=args.max_lines)

    logger.debug(f"Reading '{args.path}' with {options}")
    try:
        if args.max_lines == 0:
            pass
        elif args.use_async:
            anyio.run(_run_async, args.path, renderer, options)
        else:
            each_line_sync(args.path, renderer, options)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130
    except ResourceError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2 if e.errno == errno.ENOENT else 1
    except (LineReaderError, UnicodeDecodeError) as e:
        logger.error(f"Line reading failed: {e}", exc_info=args.debug)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.count:
        print(renderer.index, file=out)
    return 0

# -----------------------------------------------------------------------------
# RENDERING
# -----------------------------------------------------------------------------

class _LineRenderer:
    """Two-argument line consumer that writes every line to a stream."""

    def __init__(
            self,
            out: TextIO,
            *,
            numbered: bool,
            as_json: bool,
            count_only: bool,
            limit: Optional[int],
    ) -> None:
        self.out = out
        self.numbered = numbered
        self.as_json = as_json
        self.count_only = count_only
        self.limit = limit
        self.index = 0

    def __call__(self, line: str, last: bool) -> bool:
        self.index += 1
        if not self.count_only:
            self.out.write(self._format(line, last) + "\n")
        return self.limit is None or self.index < self.limit

    def _format(self, line: str, last: bool) -> str:
        if self.as_json:
            payload: Dict[str, Any] = {"index": self.index, "line": line, "last": last}
            return json.dumps(payload, ensure_ascii=False)
        if self.numbered:
            return f"{self.index:6d}\t{line}"
        return line


async def _run_async(path: str, renderer: _LineRenderer, options: Any) -> None:
    await each_line(path, renderer, options).then(
        lambda: logger.debug(f"Async traversal finished after {renderer.index} lines.")
    )


if __name__ == "__main__":
    sys.exit(main())
