"""
Logger and appender registry

A LoggingContext owns the tree of loggers and the named appenders, and
applies LoggingConfig objects to them. The module keeps a default context
that is set up at import with console output on the root logger, and the
module functions use_logger(), configure_logging() and reset_logging()
work on that one.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Mapping, Optional, Union

from treelog.core.errors import ConfigurationError
from treelog.core.log_level import LevelLike, LogLevel, to_level_name
from treelog.core.logger import Logger
from treelog.core.logging_config import (
    ROOT_LOGGER_NAME,
    AppenderConfig,
    LoggerConfig,
    LoggingConfig,
)
from treelog.formatters.value_formatter import format_any

INTERNAL_LOGGER_NAME = "treelog"


def _apply_option(instance: Any, key: str, value: Any) -> None:
    if hasattr(instance, "set_option"):
        instance.set_option(key, value)
    elif hasattr(instance, key):
        setattr(instance, key, value)
    else:
        raise ConfigurationError(f"unknown option '{key}' for {type(instance).__name__}")


class LoggingContext:
    """
    Registry of loggers and appenders.

    Loggers are created on first use, together with all missing ancestors,
    and live as long as the context. Appenders are shared by reference:
    every logger listing an appender name holds the same instance.

    Thread Safety:
        Registry changes are serialized by an internal lock. Logging itself
        does not take the lock.
    """

    def __init__(self, config: Union[LoggingConfig, Mapping[str, Any], None] = None):
        """
        Initialize context.

        Args:
            config: Initial configuration (default: LoggingConfig.default())
        """
        self.loggers: Dict[str, Logger] = {}
        self.appenders: Dict[str, Any] = {}
        self._lock = threading.RLock()
        self.reset(config)

    def reset(self, config: Union[LoggingConfig, Mapping[str, Any], None] = None) -> None:
        """
        Forget all loggers and appenders and apply a fresh configuration.

        Appenders are not closed.
        """
        with self._lock:
            self.loggers.clear()
            self.appenders.clear()
            self._log = self.use_logger(INTERNAL_LOGGER_NAME, LogLevel.INFO)
            self.configure(config if config is not None else LoggingConfig.default())

    def use_logger(self, name: str = ROOT_LOGGER_NAME, level: Optional[LevelLike] = None) -> Logger:
        """
        Get a logger, creating it and its ancestors if needed.

        Args:
            name: Dotted logger name, '' or 'root' for the root logger
            level: If given, set as the logger's own level

        Returns:
            The logger registered under name
        """
        if name == "root":
            name = ROOT_LOGGER_NAME
        with self._lock:
            logger = self.loggers.get(name)
            if logger is None:
                if name == ROOT_LOGGER_NAME:
                    logger = Logger(ROOT_LOGGER_NAME)
                else:
                    parent_name = name.rpartition(".")[0]
                    logger = Logger(name, self.use_logger(parent_name))
                self.loggers[name] = logger
            if level is not None:
                logger.level = level
            return logger

    def configure(self, config: Union[LoggingConfig, Mapping[str, Any]]) -> None:
        """
        Apply a logging configuration.

        All appenders are created before anything is changed. If one of
        them fails, the ones already created are closed and the context is
        left as it was. Then appenders replace those of the same name in
        every logger that holds them, and the root and the named loggers
        get their level, call site flag and appenders.

        Raises:
            ValidationError: If a level is invalid
            ConfigurationError: If an appender cannot be created or configured
        """
        if not isinstance(config, LoggingConfig):
            config = LoggingConfig.from_dict(config)

        with self._lock:
            self._log.debug("configure logging")
            instances = self._create_appenders(config.appender)
            if instances:
                self._log.debug("configure appender")
                for appender_name, instance in instances.items():
                    self._register_appender(appender_name, instance)
            if config.root is not None:
                self._log.debug("configure ROOT logger")
                self._configure_logger(self.use_logger(ROOT_LOGGER_NAME), config.root)
            if config.logger:
                self._log.debug("configure additional loggers")
                for logger_name, logger_config in config.logger.items():
                    self._configure_logger(self.use_logger(logger_name), logger_config)

    def _create_appenders(self, appender_configs: Mapping[str, AppenderConfig]) -> Dict[str, Any]:
        instances: Dict[str, Any] = {}
        try:
            for appender_name, appender_config in appender_configs.items():
                instances[appender_name] = self._create_appender(appender_config)
        except ConfigurationError:
            for instance in instances.values():
                close = getattr(instance, "close", None)
                if callable(close):
                    close()
            raise
        return instances

    def _create_appender(self, appender_config: AppenderConfig) -> Any:
        try:
            instance = appender_config.ctor()
            if appender_config.level is not None:
                instance.level = appender_config.level
            for key, value in appender_config.options.items():
                _apply_option(instance, key, value)
        except Exception as exc:
            raise ConfigurationError(
                f"illegal appender config {format_any(appender_config.as_dict())}, "
                f"error: {type(exc).__name__}: {exc}"
            ) from exc
        return instance

    def _register_appender(self, appender_name: str, instance: Any) -> None:
        previous = self.appenders.get(appender_name)
        if previous is not None:
            self._log.debug(f"found existing appender: {appender_name}, search and replace it")
            for logger_name, logger in self.loggers.items():
                if logger.appenders.get(appender_name) is previous:
                    self._log.debug(f"replace appender '{appender_name}' in logger '{logger_name or 'ROOT'}'")
                    logger.add_appender(appender_name, instance, overwrite=True)
        self.appenders[appender_name] = instance

    def _configure_logger(self, logger: Logger, logger_config: LoggerConfig) -> None:
        display_name = logger.name or "ROOT"
        if logger_config.level is not None and logger.own_level != logger_config.level:
            self._log.debug(
                f"changing logger '{display_name}' level from "
                f"{to_level_name(logger.level)} to {to_level_name(logger_config.level)}"
            )
            logger.level = logger_config.level
        if logger_config.include_call_site is not None:
            logger.include_call_site = logger_config.include_call_site
        self._configure_appenders(logger, logger_config.appender or [])

    def _configure_appenders(self, logger: Logger, appender_names: List[str]) -> None:
        display_name = logger.name or "ROOT"
        for appender_name in appender_names:
            if appender_name not in self.appenders:
                self._log.warn(
                    f"Appender named '{appender_name}' is not configured. "
                    f"Can't be used in logger '{display_name}'"
                )
                continue
            if appender_name not in logger.appenders:
                self._log.debug(f"registering appender '{appender_name}' to logger '{display_name}'")
                logger.add_appender(appender_name, self.appenders[appender_name])

        for appender_name in list(logger.appenders):
            if appender_name not in appender_names:
                logger.remove_appender(appender_name)
                self._log.debug(f"appender '{appender_name}' was removed from logger '{display_name}'")


_default_context = LoggingContext()


def get_context() -> LoggingContext:
    """The default context used by the module functions."""
    return _default_context


def use_logger(name: str = ROOT_LOGGER_NAME, level: Optional[LevelLike] = None) -> Logger:
    """Get a logger from the default context, see LoggingContext.use_logger()."""
    return _default_context.use_logger(name, level)


def configure_logging(config: Union[LoggingConfig, Mapping[str, Any]]) -> None:
    """Configure the default context, see LoggingContext.configure()."""
    _default_context.configure(config)


def reset_logging(config: Union[LoggingConfig, Mapping[str, Any], None] = None) -> None:
    """Reset the default context, mainly for tests."""
    _default_context.reset(config)
