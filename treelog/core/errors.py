"""
Error types and the fallback error channel

Runtime failures inside appenders are never raised to the log call site.
They are reported here, on stderr, without going through any logger.
"""

import sys


class LoggingError(Exception):
    """Base class for all treelog errors."""


class ValidationError(LoggingError, ValueError):
    """Raised for invalid level values."""


class ConfigurationError(LoggingError, ValueError):
    """Raised when an appender configuration cannot be applied."""


def report_error(message: str, exc: BaseException = None) -> None:
    """
    Report a failure out-of-band.

    Args:
        message: What went wrong
        exc: The underlying exception, if any
    """
    if exc is None:
        print(message, file=sys.stderr)
    else:
        print(f"{message}: {exc!r}", file=sys.stderr)
