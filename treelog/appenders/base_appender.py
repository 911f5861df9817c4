"""
Base appender interface

An appender turns LogEvents into output. Appenders are registered by
name and shared by all loggers that list that name.
"""

from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Any, FrozenSet, List, Optional

from treelog.core.errors import ConfigurationError, report_error
from treelog.core.log_event import LogEvent
from treelog.core.log_level import LevelLike, to_threshold
from treelog.formatters.prefix import format_prefix
from treelog.formatters.value_formatter import format_any


class BaseAppender(ABC):
    """
    Abstract base class for appenders.

    Subclasses implement write(). handle() takes care of the level check
    and of reporting errors, so that a failing appender never breaks the
    code that is logging.
    """

    # Keys accepted by set_option(), extended by subclasses
    OPTIONS: FrozenSet[str] = frozenset({"level"})

    def __init__(self, level: Optional[LevelLike] = None):
        """
        Initialize appender.

        Args:
            level: Minimum level to handle, None handles everything
        """
        self._level: Optional[int] = None
        if level is not None:
            self.level = level

    @property
    def level(self) -> Optional[int]:
        return self._level

    @level.setter
    def level(self, value: Optional[LevelLike]) -> None:
        self._level = None if value is None else to_threshold(value)

    def will_handle(self, event: LogEvent) -> bool:
        """
        Check if this appender is going to handle an event.

        Cheap and free of side effects, loggers call it before handle().
        """
        return self._level is None or event.level >= self._level

    def handle(self, event: LogEvent) -> "Future[None]":
        """
        Write the event.

        Args:
            event: The event to write

        Returns:
            Future completed when the output is done
        """
        future: "Future[None]" = Future()
        if self.will_handle(event):
            self._write_reporting_errors(event)
        future.set_result(None)
        return future

    def _write_reporting_errors(self, event: LogEvent) -> None:
        try:
            self.write(event)
        except Exception as exc:
            report_error(f"Error during {type(self).__name__}.handle", exc)

    @abstractmethod
    def write(self, event: LogEvent) -> None:
        """
        Produce the output for one event.

        Args:
            event: The event to write, already level checked
        """
        pass

    def format_prefix(self, event: LogEvent, colored: bool = False) -> str:
        """Line prefix with timestamp, level, logger name and call site."""
        return format_prefix(event.timestamp, event.level, event.logger_name, colored, event.call_site)

    def format_payload(self, event: LogEvent, pretty: bool = False, colored: bool = False) -> List[str]:
        """Render each payload element, or the result of a lazy payload."""
        if event.is_lazy:
            return [str(event.payload())]
        return [format_any(elem, pretty, colored) for elem in event.payload]

    def format_line(self, event: LogEvent, pretty: bool = False, colored: bool = False) -> str:
        return " ".join([self.format_prefix(event, colored)] + self.format_payload(event, pretty, colored))

    def set_option(self, key: str, value: Any) -> None:
        """
        Apply one configuration option.

        Raises:
            ConfigurationError: If the key is not one of OPTIONS
        """
        if key not in self.OPTIONS:
            raise ConfigurationError(f"unknown option '{key}' for {type(self).__name__}")
        setattr(self, key, value)

    def close(self) -> None:
        """Release resources. Not called by the loggers."""
        pass
