"""
Core module for treelog

This module contains the fundamental classes:
- Logger: Node of the logger tree
- LogEvent: Log event data structure
- LogLevel: Log level enumeration
- LoggingConfig: Configuration objects
- LoggingContext: Registry of loggers and appenders
"""

from treelog.core.log_level import LogLevel
from treelog.core.log_event import CallSite, LogEvent
from treelog.core.logger import Logger
from treelog.core.logging_config import AppenderConfig, LoggerConfig, LoggingConfig
from treelog.core.config_builder import LoggingConfigBuilder
from treelog.core.context import LoggingContext

__all__ = [
    "LogLevel",
    "CallSite",
    "LogEvent",
    "Logger",
    "AppenderConfig",
    "LoggerConfig",
    "LoggingConfig",
    "LoggingConfigBuilder",
    "LoggingContext",
]
