from __future__ import annotations

"""
Logging Configuration Models.

Defines the data structures and constants required to initialize the
diagnostic output of the linereader command line tool. The library modules
never configure logging on their own; they only emit records through
module-level loggers under the 'linereader' namespace.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

PACKAGE_LOGGER = "linereader"

# Mapping of string identifiers to native logging constants
_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable specification for the logging subsystem initialization.

    Attributes:
        level: Minimum severity level to capture.
        logger_name: Logger receiving the handlers ('' targets the root).
        console: Flag to enable stderr stream output.
        log_file: Optional path for a rotating diagnostic file.
        max_bytes: Maximum size per log segment before rotation.
        backup_count: Number of historical log segments to preserve.
        console_fmt: Structural format for terminal output.
        file_fmt: Structural format for file entries.
        datefmt: Chronological format for timestamp generation.
    """
    level: str = "WARNING"
    logger_name: str = PACKAGE_LOGGER
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 2

    console_fmt: str = "linereader: %(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
