"""
Fire-and-forget dispatch of events to appenders

Logger.emit never waits for an appender. Whatever handle() returns is
detached with an error callback so that failures end up on the fallback
error channel instead of the log call site.
"""

from __future__ import annotations

import asyncio
import inspect
import threading
from concurrent.futures import Future
from typing import Any, Optional, Set

from treelog.core.errors import report_error
from treelog.core.log_event import LogEvent

# Strong references to running tasks, the event loop only keeps weak ones
_pending_tasks: Set[asyncio.Task] = set()

# Loop for coroutines handed over from threads without a running loop
_background_loop: Optional[asyncio.AbstractEventLoop] = None
_background_lock = threading.Lock()


def _failure_reporter(appender_name: str):
    def report(completion: Any) -> None:
        if completion.cancelled():
            return
        exc = completion.exception()
        if exc is not None:
            report_error(f"error in appender.handle of {appender_name}", exc)

    return report


def _get_background_loop() -> asyncio.AbstractEventLoop:
    """Event loop running forever on a daemon thread, started on first use."""
    global _background_loop
    with _background_lock:
        if _background_loop is None:
            loop = asyncio.new_event_loop()
            thread = threading.Thread(
                target=loop.run_forever,
                name="treelog-async-appenders",
                daemon=True,
            )
            thread.start()
            _background_loop = loop
        return _background_loop


def _schedule(appender_name: str, awaitable: Any) -> None:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop is None:
        async def run() -> None:
            await awaitable

        future = asyncio.run_coroutine_threadsafe(run(), _get_background_loop())
        future.add_done_callback(_failure_reporter(appender_name))
        return

    task = asyncio.ensure_future(awaitable)
    _pending_tasks.add(task)
    task.add_done_callback(_pending_tasks.discard)
    task.add_done_callback(_failure_reporter(appender_name))


def dispatch_handle(appender_name: str, appender: Any, event: LogEvent) -> None:
    """
    Hand an event to an appender without waiting for it.

    Coroutines run on the caller's event loop when there is one, otherwise
    on a private loop in a background thread.

    Args:
        appender_name: Name the appender is registered under, used in
            error reports
        appender: Object with a handle(event) method returning a Future,
            an awaitable or None
        event: Event to handle
    """
    try:
        completion = appender.handle(event)
    except Exception as exc:
        report_error(f"error in appender.handle of {appender_name}", exc)
        return

    if isinstance(completion, Future):
        completion.add_done_callback(_failure_reporter(appender_name))
    elif inspect.isawaitable(completion):
        _schedule(appender_name, completion)
