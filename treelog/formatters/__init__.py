"""
Formatters module

Rendering of payload values and of the line prefix.
"""

from treelog.formatters.ansi import Ansi
from treelog.formatters.value_formatter import CircularTracker, format_any, get_all_entries, get_class_hierarchy
from treelog.formatters.prefix import format_iso8601, format_log_level, format_prefix

__all__ = [
    "Ansi",
    "CircularTracker",
    "format_any",
    "get_all_entries",
    "get_class_hierarchy",
    "format_iso8601",
    "format_log_level",
    "format_prefix",
]
