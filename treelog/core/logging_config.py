"""
Logging configuration

Declarative description of appenders and loggers, applied with
configure_logging(). Shapes and levels are validated when the objects
are created, and appenders are built before any of them is registered,
so a bad configuration is rejected before anything changes.
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from treelog.core.errors import ConfigurationError
from treelog.core.log_level import LevelLike, to_level
from treelog.formatters.value_formatter import format_any

ROOT_LOGGER_NAME = ""


@dataclass
class AppenderConfig:
    """
    Appender configuration.

    ctor is called without arguments, then level and options are applied
    through the appender's set_option().
    """

    ctor: type
    level: Optional[LevelLike] = None
    options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not inspect.isclass(self.ctor):
            raise ConfigurationError(f"illegal appender config {format_any(self.as_dict())}")
        if self.level is not None:
            self.level = to_level(self.level)

    def as_dict(self) -> Dict[str, Any]:
        """The configuration in the shape accepted by from_dict()."""
        data: Dict[str, Any] = {"ctor": self.ctor}
        if self.level is not None:
            data["level"] = self.level
        data.update(self.options)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppenderConfig":
        """
        Create appender configuration from a mapping.

        ``class`` is accepted as an alias of ``ctor``. All keys besides
        ctor and level are options.

        Raises:
            ConfigurationError: If there is no constructible ctor
            ValidationError: If level is invalid
        """
        options = dict(data)
        ctor = options.pop("ctor", None)
        if ctor is None:
            ctor = options.pop("class", None)
        if not inspect.isclass(ctor):
            raise ConfigurationError(f"illegal appender config {format_any(dict(data))}")
        level = options.pop("level", None)
        return cls(ctor=ctor, level=level, options=options)


@dataclass
class LoggerConfig:
    """
    Configuration of a single logger.

    appender lists the names of the appenders the logger ends up with,
    None means none at all. level and include_call_site are left
    unchanged (inherited) when None.
    """

    level: Optional[LevelLike] = None
    include_call_site: Optional[bool] = None
    appender: Optional[List[str]] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.level is not None:
            self.level = to_level(self.level)
        if isinstance(self.appender, str):
            self.appender = [self.appender]
        elif self.appender is not None:
            self.appender = list(self.appender)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LoggerConfig":
        """Create logger configuration from a mapping."""
        unknown = set(data) - {"level", "include_call_site", "appender"}
        if unknown:
            raise ConfigurationError(f"illegal logger config {format_any(dict(data))}")
        return cls(
            level=data.get("level"),
            include_call_site=data.get("include_call_site"),
            appender=data.get("appender"),
        )


@dataclass
class LoggingConfig:
    """
    Complete logging configuration.

    Example:
        config = LoggingConfig.from_dict({
            "appender": {
                "CONSOLE": {"ctor": ConsoleAppender},
                "FILE": {"ctor": FileAppender, "level": "INFO", "base_name": "app"},
            },
            "root": {"level": "INFO", "appender": ["CONSOLE", "FILE"]},
            "logger": {
                "foo": {"level": "ERROR"},
                "foo.bar": {"level": "DEBUG", "appender": ["CONSOLE"]},
            },
        })
    """

    appender: Dict[str, AppenderConfig] = field(default_factory=dict)
    root: Optional[LoggerConfig] = None
    logger: Dict[str, LoggerConfig] = field(default_factory=dict)

    def __post_init__(self):
        """Validate configuration after initialization."""
        if ROOT_LOGGER_NAME in self.logger:
            raise ConfigurationError("the root logger is configured with 'root', not as a named logger")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LoggingConfig":
        """
        Create logging configuration from a mapping.

        Raises:
            ConfigurationError: If an appender or logger entry has the wrong shape
            ValidationError: If any level is invalid
        """
        unknown = set(data) - {"appender", "root", "logger"}
        if unknown:
            raise ConfigurationError(f"unknown logging config sections: {sorted(unknown)}")
        appenders = {
            name: entry if isinstance(entry, AppenderConfig) else AppenderConfig.from_dict(entry)
            for name, entry in (data.get("appender") or {}).items()
        }
        root = data.get("root")
        if root is not None and not isinstance(root, LoggerConfig):
            root = LoggerConfig.from_dict(root)
        loggers = {
            name: entry if isinstance(entry, LoggerConfig) else LoggerConfig.from_dict(entry)
            for name, entry in (data.get("logger") or {}).items()
        }
        return cls(appender=appenders, root=root, logger=loggers)

    @classmethod
    def default(cls) -> "LoggingConfig":
        """Console output on the root logger at INFO."""
        from treelog.appenders.console_appender import ConsoleAppender

        return cls(
            appender={"CONSOLE": AppenderConfig(ctor=ConsoleAppender)},
            root=LoggerConfig(level="INFO", appender=["CONSOLE"]),
        )

    @classmethod
    def debug_config(cls) -> "LoggingConfig":
        """Colored console output on the root logger at DEBUG, with call sites."""
        from treelog.appenders.console_appender import ConsoleAppender

        return cls(
            appender={"CONSOLE": AppenderConfig(ctor=ConsoleAppender, options={"colored": True})},
            root=LoggerConfig(level="DEBUG", include_call_site=True, appender=["CONSOLE"]),
        )
