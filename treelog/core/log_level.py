"""
Log level enumeration and conversions
"""

from enum import IntEnum
from typing import Dict, Union

from treelog.core.errors import ValidationError


class LogLevel(IntEnum):
    """
    Log level enumeration.

    OFF is only a threshold, nothing is ever logged at OFF.
    """

    TRACE = 0       # Most verbose, detailed tracing
    DEBUG = 10      # Debug information
    INFO = 20       # Informational messages
    WARN = 30       # Warning messages
    ERROR = 40      # Error messages
    FATAL = 50      # Fatal errors
    OFF = 1000      # Logging disabled

    def __str__(self) -> str:
        """String representation of log level."""
        return self.name

    @classmethod
    def from_string(cls, level_str: str) -> "LogLevel":
        """
        Convert string to LogLevel.

        Args:
            level_str: Level name (case-insensitive)

        Returns:
            LogLevel enum value

        Raises:
            ValidationError: If level_str is not valid
        """
        name = level_str.strip().upper()
        if name in LEVEL_FROM_NAME:
            return LEVEL_FROM_NAME[name]
        raise ValidationError(f"not a valid LogLevel: '{level_str}'")

    @property
    def color_code(self) -> str:
        """
        Get ANSI color code for this level.

        Returns:
            ANSI escape sequence, empty for OFF
        """
        colors = {
            LogLevel.TRACE: "\033[90m",     # Dark gray
            LogLevel.DEBUG: "\033[37m",     # Gray
            LogLevel.INFO: "\033[92m",      # Green
            LogLevel.WARN: "\033[93m",      # Yellow
            LogLevel.ERROR: "\033[91m",     # Red
            LogLevel.FATAL: "\033[95m",     # Magenta
        }
        return colors.get(self, "")

    @property
    def reset_code(self) -> str:
        """ANSI reset code."""
        return "\033[m"


LevelLike = Union[LogLevel, int, str]

# Mapping from log level to names
LEVEL_NAMES: Dict[LogLevel, str] = {level: level.name for level in LogLevel}

# Reverse mapping
LEVEL_FROM_NAME: Dict[str, LogLevel] = {v: k for k, v in LEVEL_NAMES.items()}


def _invalid(value) -> ValidationError:
    return ValidationError(f"not a valid LogLevel: '{value}'")


def to_level(value: LevelLike) -> LogLevel:
    """
    Convert a level name or one of the named constants to a LogLevel.

    Only the seven named values are accepted. Use to_threshold() where
    ad-hoc numeric thresholds are wanted.

    Raises:
        ValidationError: If the value is not a known level
    """
    if isinstance(value, bool):
        raise _invalid(value)
    if isinstance(value, str):
        return LogLevel.from_string(value)
    if isinstance(value, int):
        try:
            return LogLevel(value)
        except ValueError:
            raise _invalid(value) from None
    raise _invalid(value)


def to_threshold(value: LevelLike) -> int:
    """
    Convert a value to a level threshold.

    Accepts everything to_level() accepts plus any integer between
    TRACE and OFF, e.g. 12 for "a bit above DEBUG".

    Raises:
        ValidationError: If the value is neither a level name nor in range
    """
    if isinstance(value, (str, LogLevel)):
        return to_level(value)
    if isinstance(value, int) and not isinstance(value, bool):
        if LogLevel.TRACE <= value <= LogLevel.OFF:
            try:
                return LogLevel(value)
            except ValueError:
                return int(value)
    raise _invalid(value)


def to_level_name(value: LevelLike) -> str:
    """
    Get the name for a level.

    A number that is not a named level gets the name of the highest
    named level below it, or TRACE if it is below all of them.
    """
    if isinstance(value, str):
        return LogLevel.from_string(value).name
    for level in sorted(LogLevel, reverse=True):
        if value >= level:
            return level.name
    return LogLevel.TRACE.name
