"""
Line prefix helpers

Every appender line starts with
``<timestamp> <level> [<logger name>] (<call site>):`` where the level
and the logger name are padded so that columns line up.
"""

from datetime import datetime
from typing import Optional

from treelog.core.log_event import CallSite
from treelog.core.log_level import LogLevel, to_level_name

LOGGER_NAME_WIDTH = 20
CALL_SITE_FILE_WIDTH = 50


def format_iso8601(ts: datetime) -> str:
    """
    Format a timestamp as ``YYYY-MM-DDTHH:MM:SS.mmm+HH:MM``.

    Naive timestamps are taken as local time.
    """
    return ts.astimezone().isoformat(timespec="milliseconds")


def format_log_level(level: int, colored: bool = False) -> str:
    """
    Get the level name, optionally wrapped in the level's color.

    Levels between the named ones use the name of the next lower level.
    OFF has no color and renders empty when colored.
    """
    name = to_level_name(level)
    if not colored:
        return name
    named = LogLevel.from_string(name)
    if not named.color_code:
        return ""
    return f"{named.color_code}{name}{named.reset_code}"


def truncate_middle(text: str, length: int, replacement: str = "...") -> str:
    """
    Truncate a string in the middle if it is longer than length.

    Example:
        truncate_middle("longer then", 10) == "long...hen"
    """
    if len(text) <= length:
        return text

    chars_to_show = length - len(replacement)
    front = (chars_to_show + 1) // 2
    back = chars_to_show // 2
    return text[:front] + replacement + (text[-back:] if back else "")


def truncate_or_extend(text: str, length: int) -> str:
    """Truncate in the middle or pad on the right to exactly length."""
    return truncate_middle(text, length).ljust(length)


def truncate_or_extend_left(text: str, length: int, replacement: str = "...") -> str:
    """
    Keep the end of a string, or pad it on the left, to exactly length.

    Used for file paths where the file name matters most.
    """
    if len(text) > length:
        keep = length - len(replacement)
        text = replacement + (text[-keep:] if keep > 0 else "")
    return text.rjust(length)


def format_call_site(call_site: Optional[CallSite]) -> str:
    if call_site is None:
        return ""
    path = truncate_or_extend_left(call_site.file, CALL_SITE_FILE_WIDTH)
    return f" ({path}:{call_site.line:>4}:{call_site.column:>2})"


def format_prefix(
    ts: datetime,
    level: int,
    name: str,
    colored: bool = False,
    call_site: Optional[CallSite] = None,
) -> str:
    """
    Format the prefix of each log line.

    Args:
        ts: Event timestamp
        level: Event level
        name: Logger name, truncated or padded to 20 characters
        colored: Use ANSI colors for the level
        call_site: Optional call site appended after the logger name

    Returns:
        Prefix ending with a colon
    """
    level_str = format_log_level(level, colored)
    # colored names carry 8 invisible characters of escape codes
    padded_level = level_str.rjust(13 if colored else 5)
    padded_name = truncate_or_extend(name, LOGGER_NAME_WIDTH)
    return f"{format_iso8601(ts)} {padded_level} [{padded_name}]{format_call_site(call_site)}:"
