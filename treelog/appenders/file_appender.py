"""Daily file appender"""

import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from treelog.appenders.queued_appender import QueuedAppender
from treelog.core.errors import report_error
from treelog.core.log_event import LogEvent
from treelog.core.log_level import LevelLike


def calc_full_file_path(
    file_path: Union[str, Path, None],
    base_name: Optional[str],
    extension: str,
    time_stamp: str,
) -> Optional[Path]:
    """
    Build the path of a log file and check that it can be written.

    The directory is not created, it has to exist.

    Args:
        file_path: Directory of the log file
        base_name: First part of the file name, may be empty
        extension: File extension without dot
        time_stamp: Second part of the file name, may be empty

    Returns:
        Full path, or None if the configuration is not usable (the
        reason is reported on the error channel)
    """
    if not file_path:
        report_error("FileAppender is not configured properly: file_path not given")
        return None
    directory = Path(file_path)
    if not directory.is_dir():
        report_error(
            f"FileAppender is not configured properly: file_path '{directory}' "
            "does not exist or is not a directory"
        )
        return None
    if base_name is None:
        report_error("FileAppender is not configured properly: base_name must not be None")
        return None
    if not base_name and not time_stamp:
        report_error("FileAppender is not configured properly: either base_name or time stamp must not be empty")
        return None
    if not extension:
        report_error("FileAppender is not configured properly: extension must not be empty")
        return None

    file_name = f"{base_name}-{time_stamp}" if base_name and time_stamp else base_name or time_stamp
    full_path = directory / f"{file_name}.{extension}"
    if full_path.is_dir():
        report_error(f"FileAppender is not configured properly: path '{full_path}' is a directory")
        return None
    return full_path


class FileAppender(QueuedAppender):
    """
    Append events to one file per calendar day.

    Files are named ``<base_name>-<YYYY-MM-DD>.<extension>`` inside
    file_path. Writes are serialized, so lines appear in call order.
    """

    OPTIONS = QueuedAppender.OPTIONS | {"file_path", "base_name", "extension", "colored", "pretty", "encoding"}

    def __init__(
        self,
        level: Optional[LevelLike] = None,
        file_path: Union[str, Path, None] = None,
        base_name: str = "",
        extension: str = "log",
        colored: bool = False,
        pretty: bool = False,
        encoding: str = "utf-8",
    ):
        """
        Initialize file appender.

        Args:
            level: Minimum level to handle
            file_path: Existing directory for the files (default: system temp dir)
            base_name: File name prefix
            extension: File extension (default: 'log')
            colored: Keep ANSI colors in the file
            pretty: Render containers over multiple lines
            encoding: File encoding (default: 'utf-8')
        """
        super().__init__(level)
        self.file_path = file_path if file_path is not None else tempfile.gettempdir()
        self.base_name = base_name
        self.extension = extension
        self.colored = colored
        self.pretty = pretty
        self.encoding = encoding

    @staticmethod
    def get_timestamp(date: datetime) -> str:
        """Date part of the file name, YYYY-MM-DD."""
        return date.strftime("%Y-%m-%d")

    def write(self, event: LogEvent) -> None:
        """Append log event to the file of the event's day."""
        full_path = calc_full_file_path(
            self.file_path, self.base_name, self.extension, self.get_timestamp(event.timestamp)
        )
        if full_path is None:
            return
        line = self.format_line(event, self.pretty, self.colored)
        with open(full_path, "a", encoding=self.encoding) as f:
            f.write(line + "\n")
