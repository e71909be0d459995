from __future__ import annotations

"""
Logging Core Orchestrator.

Maintains the idempotent lifecycle of the diagnostic logging used by the
command line tool. Records are pushed through a QueueHandler so that file
writes never stall the thread (or event loop) that is reading lines.
"""

import atexit
import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from linereader.infra.logging.config import _LEVEL_MAP, LoggingConfig
from linereader.infra.logging.handlers import (
    _create_rotating_file_handler,
    _is_our_handler,
    _tag_handler,
)

# Internal state flags for idempotency and lifecycle tracking
_CONFIGURED_FLAG_ATTR: str = "_linereader_configured"
_QUEUE_LISTENER_ATTR: str = "_linereader_queue_listener"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Attach console/file handlers to the configured logger, once.

    Args:
        cfg: Structural configuration for the logging system.
        force: If True, drop previously attached handlers and start over.

    Returns:
        logging.Logger: The configured logger instance.
    """
    target = logging.getLogger(cfg.logger_name or None)

    already_configured = bool(getattr(target, _CONFIGURED_FLAG_ATTR, False))
    if already_configured and not force:
        return target

    level_int = _parse_level(cfg.level)
    target.setLevel(level_int)

    _remove_our_handlers(target)
    _stop_existing_listener(target)

    handlers_list: List[logging.Handler] = []

    if cfg.console:
        sh = logging.StreamHandler(sys.stderr)
        sh.setLevel(level_int)
        sh.setFormatter(logging.Formatter(cfg.console_fmt))
        _tag_handler(sh)
        handlers_list.append(sh)

    if cfg.log_file:
        fh = _create_rotating_file_handler(
            cfg.log_file,
            level_int,
            logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt),
            cfg.max_bytes,
            cfg.backup_count,
        )
        if fh:
            handlers_list.append(fh)

    if not handlers_list:
        return target

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    queue_handler = QueueHandler(log_queue)
    _tag_handler(queue_handler)

    listener = QueueListener(log_queue, *handlers_list, respect_handler_level=True)
    listener.start()

    target.addHandler(queue_handler)
    # Package records must not be printed twice by a host application's root handlers
    if cfg.logger_name:
        target.propagate = False

    setattr(target, _QUEUE_LISTENER_ATTR, listener)
    setattr(target, _CONFIGURED_FLAG_ATTR, True)

    atexit.register(_safe_stop_listener, listener)
    return target


def shutdown_logging(logger_name: str = "linereader") -> None:
    """Flush pending records and detach every handler installed by configure_logging."""
    target = logging.getLogger(logger_name or None)
    _stop_existing_listener(target)
    _remove_our_handlers(target)
    if getattr(target, _CONFIGURED_FLAG_ATTR, False):
        setattr(target, _CONFIGURED_FLAG_ATTR, False)
        target.propagate = True


def get_logger(name: str) -> logging.Logger:
    """
    Acquire a named logger instance.

    Args:
        name: Hierarchical name for the logger (usually __name__).

    Returns:
        logging.Logger: The requested logger instance.
    """
    return logging.getLogger(name)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _parse_level(level: str) -> int:
    """Convert a string-based logging level to its numeric constant."""
    if not level:
        return logging.WARNING
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.WARNING)


def _remove_our_handlers(target: logging.Logger) -> None:
    """Detach and close every internally-managed handler."""
    for h in list(target.handlers):
        if _is_our_handler(h):
            target.removeHandler(h)
            h.close()


def _stop_existing_listener(target: logging.Logger) -> None:
    """Terminate the QueueListener installed by a previous configuration."""
    listener = getattr(target, _QUEUE_LISTENER_ATTR, None)
    if listener:
        _safe_stop_listener(listener)
        setattr(target, _QUEUE_LISTENER_ATTR, None)


def _safe_stop_listener(listener: Optional[QueueListener]) -> None:
    """
    Stop a QueueListener, tolerating a listener that was already stopped.

    QueueListener.stop() joins its thread and resets it to None; calling it a
    second time (atexit after an explicit shutdown) would fail.
    """
    if not listener:
        return
    if getattr(listener, "_thread", None) is not None:
        listener.stop()
