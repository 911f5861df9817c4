"""
Queued appender base

Writes happen on a private worker thread, one at a time and in the order
the events were handled, so slow output never blocks the caller.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from treelog.appenders.base_appender import BaseAppender
from treelog.core.errors import report_error
from treelog.core.log_event import LogEvent


class QueuedAppender(BaseAppender):
    """
    Base for appenders doing blocking I/O.

    The queue is unbounded: when the output cannot keep up, pending
    writes pile up in memory.

    Thread Safety:
        handle(), flush() and close() may be called from any thread.
    """

    def __init__(self, level=None):
        super().__init__(level)
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()
        self._closed = False

    def _get_executor(self) -> Optional[ThreadPoolExecutor]:
        with self._lock:
            if self._closed:
                return None
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1,
                    thread_name_prefix=f"{type(self).__name__}-worker",
                )
            return self._executor

    def handle(self, event: LogEvent) -> "Future[None]":
        """
        Queue the event for writing.

        Events handed in after close() are dropped and reported.

        Returns:
            Future completed once this event has been written
        """
        if self.will_handle(event):
            executor = self._get_executor()
            try:
                if executor is not None:
                    return executor.submit(self._write_reporting_errors, event)
            except RuntimeError:
                pass  # shut down by a concurrent close()
            report_error(f"{type(self).__name__} is closed, event dropped")
        future: "Future[None]" = Future()
        future.set_result(None)
        return future

    def flush(self, timeout: Optional[float] = None) -> None:
        """Wait until all events handled so far have been written."""
        with self._lock:
            executor = self._executor
        if executor is not None and not self._closed:
            executor.submit(lambda: None).result(timeout=timeout)

    def close(self) -> None:
        """Write pending events, release resources and stop the worker."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            executor = self._executor
            self._executor = None

        if executor is None:
            self._release()
            return
        executor.submit(self._release).result()
        executor.shutdown(wait=True)

    def _release(self) -> None:
        """Release resources, runs on the worker thread if there is one."""
        pass

    def __enter__(self) -> QueuedAppender:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
