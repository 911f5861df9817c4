"""Appenders module - Log output handlers"""

from treelog.appenders.base_appender import BaseAppender
from treelog.appenders.queued_appender import QueuedAppender
from treelog.appenders.console_appender import ConsoleAppender
from treelog.appenders.file_appender import FileAppender
from treelog.appenders.sqlite_appender import SQLiteAppender

__all__ = ["BaseAppender", "QueuedAppender", "ConsoleAppender", "FileAppender", "SQLiteAppender"]
