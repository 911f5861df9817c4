"""Builder pattern for logging configuration"""

from typing import Any, Dict, Optional

from treelog.core.log_level import LevelLike
from treelog.core.logging_config import AppenderConfig, LoggerConfig, LoggingConfig


class LoggingConfigBuilder:
    """
    Builder pattern for LoggingConfig construction.

    Example:
        config = (LoggingConfigBuilder()
            .with_appender("CONSOLE", ConsoleAppender, colored=True)
            .with_appender("FILE", FileAppender, level="WARN", file_path="logs")
            .with_root("INFO", "CONSOLE")
            .with_logger("db", "DEBUG", "FILE")
            .build())
    """

    def __init__(self):
        self._appenders: Dict[str, AppenderConfig] = {}
        self._root: Optional[LoggerConfig] = None
        self._loggers: Dict[str, LoggerConfig] = {}

    def with_appender(
        self, name: str, ctor: type, level: Optional[LevelLike] = None, **options: Any
    ) -> "LoggingConfigBuilder":
        """Add an appender, options are applied with set_option()."""
        self._appenders[name] = AppenderConfig(ctor=ctor, level=level, options=options)
        return self

    def with_root(
        self, level: Optional[LevelLike] = None, *appenders: str, include_call_site: Optional[bool] = None
    ) -> "LoggingConfigBuilder":
        """Configure the root logger."""
        self._root = LoggerConfig(level=level, include_call_site=include_call_site, appender=list(appenders))
        return self

    def with_logger(
        self,
        name: str,
        level: Optional[LevelLike] = None,
        *appenders: str,
        include_call_site: Optional[bool] = None,
    ) -> "LoggingConfigBuilder":
        """Configure a named logger."""
        self._loggers[name] = LoggerConfig(level=level, include_call_site=include_call_site, appender=list(appenders))
        return self

    def build(self) -> LoggingConfig:
        """Build the configuration."""
        return LoggingConfig(appender=dict(self._appenders), root=self._root, logger=dict(self._loggers))
