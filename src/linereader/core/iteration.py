from __future__ import annotations

"""
Line Iteration Drivers.

Turns the 'read one line' primitives of the line sources into a controllable
'for each line' traversal. Both drivers report whether the delivered line is
the last one, honour consumer-driven early termination and guarantee that
the byte source is closed on every exit path.
"""

import inspect
import logging
from typing import Any, Callable, Optional

import anyio
import anyio.lowlevel

from linereader.core.reader_async import AsyncLineReader
from linereader.core.reader_sync import SyncLineReader
from linereader.infra.source import PathLike

logger = logging.getLogger(__name__)

LineCallback = Callable[..., Any]
CompletionCallback = Callable[[], Any]


# -----------------------------------------------------------------------------
# COOPERATIVE DRIVER
# -----------------------------------------------------------------------------

class _Decision:
    """Continuation handed to three-argument consumers."""

    def __init__(self) -> None:
        self.event = anyio.Event()
        self.proceed = True

    def __call__(self, should_continue: Any = True) -> None:
        # Only the first answer for a given line counts
        if self.event.is_set():
            logger.debug("Ignoring repeated continuation call for the same line.")
            return
        self.proceed = should_continue is not False
        self.event.set()


class LineIteration:
    """
    Handle over an asynchronous per-line traversal of one file.

    Await the handle (or its run() coroutine, e.g. from a task group) to drive
    the traversal. The completion callback registered with then() fires
    exactly once, after the last line or after an early stop. A callback
    registered after completion fires immediately upon registration.

    Faults raised while opening or reading abort the traversal: the source
    is closed, the error propagates out of run() and completion never fires.
    """

    def __init__(self, path: PathLike, callback: LineCallback, options: Any = None) -> None:
        if not callable(callback):
            raise TypeError("Line callback must be callable.")
        self.path = path
        self.options = options
        self._callback = callback
        self._explicit = _takes_continuation(callback)
        self._final: Optional[CompletionCallback] = None
        self._started = False
        self._completed = False
        self._notified = False
        self.lines_delivered = 0

    def then(self, fn: CompletionCallback) -> "LineIteration":
        """Register the completion callback, replacing any earlier one."""
        self._final = fn
        if self._completed:
            self._notify()
        return self

    @property
    def completed(self) -> bool:
        return self._completed

    async def run(self) -> int:
        """
        Drive the traversal to completion.

        Returns:
            int: Number of lines handed to the consumer.
        """
        if self._started:
            raise RuntimeError("Line iteration has already been started.")
        self._started = True

        reader = await AsyncLineReader.open(self.path, self.options)
        try:
            while reader.has_next_line():
                # Yield to the scheduler between lines instead of recursing
                await anyio.lowlevel.checkpoint()

                line = await reader.next_line()
                last = not reader.has_next_line()
                self.lines_delivered += 1

                if not await self._dispatch(line, last):
                    logger.debug(f"Consumer stopped iteration after {self.lines_delivered} lines.")
                    break
        finally:
            await reader.aclose()

        self._completed = True
        self._notify()
        return self.lines_delivered

    def __await__(self):
        return self.run().__await__()

    async def _dispatch(self, line: str, last: bool) -> bool:
        if self._explicit:
            decision = _Decision()
            result = self._callback(line, last, decision)
            if inspect.isawaitable(result):
                await result
            await decision.event.wait()
            return decision.proceed

        result = self._callback(line, last)
        if inspect.isawaitable(result):
            result = await result
        return result is not False

    def _notify(self) -> None:
        if self._notified or self._final is None:
            return
        self._notified = True
        self._final()


def each_line(path: PathLike, callback: LineCallback, options: Any = None) -> LineIteration:
    """
    Prepare an asynchronous traversal of every line in 'path'.

    The callback receives '(line, last)' and stops the traversal by returning
    False, or receives '(line, last, proceed)' and must call 'proceed()' to
    continue or 'proceed(False)' to stop. Coroutine callbacks are awaited.

    Args:
        path: File to read.
        callback: Per-line consumer.
        options: ReaderOptions or mapping of reader options.

    Returns:
        LineIteration: Awaitable handle exposing then().
    """
    return LineIteration(path, callback, options)


# -----------------------------------------------------------------------------
# BLOCKING DRIVER
# -----------------------------------------------------------------------------

def each_line_sync(path: PathLike, callback: LineCallback, options: Any = None) -> int:
    """
    Invoke 'callback(line, last)' for every line of 'path' on this thread.

    Iteration stops early when the callback returns exactly False. The file
    is closed before this function returns or raises, whatever the reason.

    Returns:
        int: Number of lines handed to the consumer.
    """
    if not callable(callback):
        raise TypeError("Line callback must be callable.")

    delivered = 0
    with SyncLineReader.open(path, options) as reader:
        while reader.has_next_line():
            line = reader.next_line()
            last = not reader.has_next_line()
            delivered += 1
            if callback(line, last) is False:
                logger.debug(f"Consumer stopped iteration after {delivered} lines.")
                break
    return delivered


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _takes_continuation(callback: LineCallback) -> bool:
    """True when the callback declares exactly three required positional parameters."""
    try:
        sig = inspect.signature(callback)
    except (TypeError, ValueError):
        return False

    required = [
        p for p in sig.parameters.values()
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
        and p.default is inspect.Parameter.empty
    ]
    return len(required) == 3
