"""
BSD 3-Clause License

Copyright (c) 2021, 🍀☀🌕🌥 🌊
All rights reserved.

treelog - A hierarchical logging framework
Named loggers in a dot-separated tree, shared named appenders
"""

__version__ = "1.0.0"
__author__ = "kcenon"
__email__ = "kcenon@naver.com"

from treelog.core.log_level import LogLevel, to_level, to_level_name, to_threshold
from treelog.core.log_event import CallSite, LogEvent
from treelog.core.errors import ConfigurationError, LoggingError, ValidationError
from treelog.core.logger import Logger
from treelog.core.logging_config import AppenderConfig, LoggerConfig, LoggingConfig
from treelog.core.config_builder import LoggingConfigBuilder
from treelog.core.context import (
    LoggingContext,
    configure_logging,
    get_context,
    reset_logging,
    use_logger,
)
from treelog.appenders import (
    BaseAppender,
    ConsoleAppender,
    FileAppender,
    QueuedAppender,
    SQLiteAppender,
)
from treelog.formatters import format_any

# Import submodules (not all classes by default)
from treelog import appenders
from treelog import formatters

__all__ = [
    "LogLevel",
    "to_level",
    "to_level_name",
    "to_threshold",
    "CallSite",
    "LogEvent",
    "LoggingError",
    "ValidationError",
    "ConfigurationError",
    "Logger",
    "AppenderConfig",
    "LoggerConfig",
    "LoggingConfig",
    "LoggingConfigBuilder",
    "LoggingContext",
    "configure_logging",
    "get_context",
    "reset_logging",
    "use_logger",
    "BaseAppender",
    "QueuedAppender",
    "ConsoleAppender",
    "FileAppender",
    "SQLiteAppender",
    "format_any",
    "appenders",
    "formatters",
]
