"""SQLite appender"""

import sqlite3
import tempfile
from pathlib import Path
from typing import Optional, Union

from treelog.appenders.file_appender import calc_full_file_path
from treelog.appenders.queued_appender import QueuedAppender
from treelog.core.log_event import LogEvent
from treelog.core.log_level import LevelLike
from treelog.formatters.prefix import format_iso8601, format_log_level


class SQLiteAppender(QueuedAppender):
    """
    Insert events into a SQLite database.

    The database file and the ``logs`` table are created on the first
    write, the connection is kept open until close(). All database access
    happens on the worker thread.
    """

    OPTIONS = QueuedAppender.OPTIONS | {"file_path", "base_name", "extension"}

    CREATE_TABLE = """
        CREATE TABLE IF NOT EXISTS logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            timestamp TEXT,
            level TEXT,
            logger_name TEXT,
            payload TEXT
        )
    """

    INSERT = "INSERT INTO logs (timestamp, level, logger_name, payload) VALUES (?, ?, ?, ?)"

    def __init__(
        self,
        level: Optional[LevelLike] = None,
        file_path: Union[str, Path, None] = None,
        base_name: str = "logging",
        extension: str = "db",
    ):
        """
        Initialize SQLite appender.

        Args:
            level: Minimum level to handle
            file_path: Existing directory of the database (default: system temp dir)
            base_name: Database file name without extension
            extension: Database file extension (default: 'db')
        """
        super().__init__(level)
        self.file_path = file_path if file_path is not None else tempfile.gettempdir()
        self.base_name = base_name
        self.extension = extension
        self._conn: Optional[sqlite3.Connection] = None

    def _connect(self) -> Optional[sqlite3.Connection]:
        if self._conn is not None:
            return self._conn
        full_path = calc_full_file_path(self.file_path, self.base_name, self.extension, "")
        if full_path is None:
            return None
        conn = sqlite3.connect(str(full_path))
        conn.execute(self.CREATE_TABLE)
        conn.commit()
        self._conn = conn
        return conn

    def write(self, event: LogEvent) -> None:
        """Insert log event into the logs table."""
        conn = self._connect()
        if conn is None:
            return
        conn.execute(
            self.INSERT,
            (
                format_iso8601(event.timestamp),
                format_log_level(event.level),
                event.logger_name,
                " ".join(self.format_payload(event)),
            ),
        )
        conn.commit()

    def _release(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
