"""Console appender with optional ANSI colors"""

import sys
from typing import Optional, TextIO

from treelog.appenders.base_appender import BaseAppender
from treelog.core.log_event import LogEvent
from treelog.core.log_level import LevelLike, LogLevel


class ConsoleAppender(BaseAppender):
    """Write events to the console, one line per event."""

    OPTIONS = BaseAppender.OPTIONS | {"colored", "pretty", "stream", "use_specific_streams"}

    def __init__(
        self,
        level: Optional[LevelLike] = None,
        colored: bool = False,
        pretty: bool = False,
        stream: Optional[TextIO] = None,
        use_specific_streams: bool = False,
    ):
        """
        Initialize console appender.

        Args:
            level: Minimum level to handle
            colored: Use ANSI color codes
            pretty: Render containers over multiple lines
            stream: Output stream (default: sys.stdout at write time)
            use_specific_streams: Send WARN and above to sys.stderr,
                ignored when a stream is given
        """
        super().__init__(level)
        self.colored = colored
        self.pretty = pretty
        self.stream = stream
        self.use_specific_streams = use_specific_streams

    def _select_stream(self, event: LogEvent) -> TextIO:
        if self.stream is not None:
            return self.stream
        if self.use_specific_streams and event.level >= LogLevel.WARN:
            return sys.stderr
        return sys.stdout

    def write(self, event: LogEvent) -> None:
        """Write event to console."""
        stream = self._select_stream(event)
        stream.write(self.format_line(event, self.pretty, self.colored) + "\n")
        stream.flush()
