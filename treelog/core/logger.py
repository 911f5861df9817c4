"""
Hierarchical Logger

Loggers form a tree by their dot-separated names, '' being the root.
Level and call site capture are inherited from the nearest ancestor
that sets them. Events go to the logger's own appenders and only bubble
up to the parent when none of them accepts the event.
"""

from __future__ import annotations

import inspect
import sys
from typing import Any, Dict, Optional

from treelog.core.dispatch import dispatch_handle
from treelog.core.log_event import CallSite, LogEvent
from treelog.core.log_level import LevelLike, LogLevel, to_threshold

DEFAULT_LEVEL = LogLevel.ERROR


def _is_lazy_message(arg: Any) -> bool:
    return inspect.isfunction(arg) or inspect.ismethod(arg)


class Logger:
    """A named node of the logger tree."""

    def __init__(
        self,
        name: str,
        parent: Optional[Logger] = None,
        level: Optional[LevelLike] = None,
    ):
        """
        Create a logger. Use LoggingContext.use_logger() instead of
        calling this directly, it keeps the tree consistent.

        Args:
            name: Full dotted name, '' for the root logger
            parent: Parent logger, None only for the root
            level: Own level, None to inherit from the parent
        """
        self.name = name
        self.parent = parent
        self.appenders: Dict[str, Any] = {}
        self._level: Optional[int] = None if level is None else to_threshold(level)
        self._include_call_site: Optional[bool] = None

    def __repr__(self) -> str:
        return f"Logger(name={self.name!r}, level={self.level!r}, appenders={list(self.appenders)})"

    @property
    def level(self) -> int:
        """Effective level: own level, else the nearest ancestor's, else ERROR."""
        logger: Optional[Logger] = self
        while logger is not None:
            if logger._level is not None:
                return logger._level
            logger = logger.parent
        return DEFAULT_LEVEL

    @level.setter
    def level(self, value: Optional[LevelLike]) -> None:
        """Set this logger's own level, None to inherit again."""
        self._level = None if value is None else to_threshold(value)

    @property
    def own_level(self) -> Optional[int]:
        """Level set on this logger itself, None if inherited."""
        return self._level

    @property
    def include_call_site(self) -> bool:
        """Whether call sites are captured, inherited like the level."""
        logger: Optional[Logger] = self
        while logger is not None:
            if logger._include_call_site is not None:
                return logger._include_call_site
            logger = logger.parent
        return False

    @include_call_site.setter
    def include_call_site(self, value: Optional[bool]) -> None:
        self._include_call_site = value

    def should_log(self, level: int) -> bool:
        """Check if a level passes this logger's effective level."""
        return level >= self.level

    def add_appender(self, name: str, appender: Any, overwrite: bool = False) -> bool:
        """
        Register an appender under a name.

        Args:
            name: Name to register the appender under
            appender: Appender instance
            overwrite: Replace an appender already registered under name

        Returns:
            True if the appender has been registered
        """
        if overwrite or name not in self.appenders:
            self.appenders[name] = appender
            return True
        return False

    def remove_appender(self, name: str) -> bool:
        """
        Remove the appender registered under a name.

        Returns:
            True if an appender was removed
        """
        if name in self.appenders:
            del self.appenders[name]
            return True
        return False

    def log(self, level: LevelLike, *args: Any) -> None:
        """
        Log at the given level.

        Like print(), any number of values can be passed; appenders decide
        how to render them. If the only argument is a plain function or a
        bound method, it is called for the message, but only once the level
        check has passed. Any other callable, a class for example, is
        logged as it is.
        """
        level = to_threshold(level)
        if level >= LogLevel.OFF or not self.should_log(level):
            return

        if len(args) == 1 and _is_lazy_message(args[0]):
            payload = (args[0](),)
        else:
            payload = args

        event = LogEvent(
            level=level,
            logger_name=self.name,
            payload=payload,
            call_site=self._capture_call_site() if self.include_call_site else None,
        )
        self.emit(event)

    def trace(self, *args: Any) -> None:
        """Log trace message."""
        self.log(LogLevel.TRACE, *args)

    def debug(self, *args: Any) -> None:
        """Log debug message."""
        self.log(LogLevel.DEBUG, *args)

    def info(self, *args: Any) -> None:
        """Log info message."""
        self.log(LogLevel.INFO, *args)

    def warn(self, *args: Any) -> None:
        """Log warning message."""
        self.log(LogLevel.WARN, *args)

    def error(self, *args: Any) -> None:
        """Log error message."""
        self.log(LogLevel.ERROR, *args)

    def fatal(self, *args: Any) -> None:
        """Log fatal message."""
        self.log(LogLevel.FATAL, *args)

    def emit(self, event: LogEvent) -> bool:
        """
        Hand an event to the registered appenders, or to the parent.

        The level is not checked here. Each appender that will handle the
        event gets it without waiting for completion. Only if none of them
        does, the event is passed to the parent logger.

        Returns:
            True if some appender along the way accepted the event
        """
        handled = False
        for appender_name, appender in list(self.appenders.items()):
            if appender.will_handle(event):
                dispatch_handle(appender_name, appender, event)
                handled = True
        if not handled and self.parent is not None:
            return self.parent.emit(event)
        return handled

    @staticmethod
    def _capture_call_site() -> Optional[CallSite]:
        """Find the first frame outside this module, None if unavailable."""
        try:
            frame = sys._getframe(1)
        except (AttributeError, ValueError):
            return None

        while frame is not None and frame.f_code.co_filename == __file__:
            frame = frame.f_back
        if frame is None:
            return None

        try:
            column = 0
            positions = getattr(frame.f_code, "co_positions", None)
            if positions is not None and frame.f_lasti >= 0:
                col_offset = list(positions())[frame.f_lasti // 2][2]
                column = (col_offset or 0) + 1
            return CallSite(
                file=frame.f_code.co_filename,
                line=frame.f_lineno,
                column=column,
                function=frame.f_code.co_name,
            )
        except (AttributeError, IndexError, TypeError, ValueError):
            return None
