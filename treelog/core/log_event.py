"""
Log event data structure
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional, Tuple, Union
import threading


Payload = Union[Tuple[Any, ...], Callable[[], str]]


def _now() -> datetime:
    return datetime.now().astimezone()


@dataclass(frozen=True)
class CallSite:
    """Where a log call was made."""

    file: str
    line: int
    column: int = 0
    function: str = ""


@dataclass(frozen=True)
class LogEvent:
    """
    A single logging call.

    Created by a Logger and handed to appenders, which must not modify it.
    The payload is the tuple of arguments given to the log method, or a
    zero-argument callable when the event was built directly.
    """

    level: int
    logger_name: str
    payload: Payload = ()
    timestamp: datetime = field(default_factory=_now)
    call_site: Optional[CallSite] = None
    thread_id: int = field(default_factory=threading.get_ident)
    thread_name: str = field(default_factory=lambda: threading.current_thread().name)

    def __post_init__(self):
        """Validate log event after initialization."""
        if isinstance(self.level, bool) or not isinstance(self.level, int):
            raise TypeError("level must be a LogLevel or int")
        if isinstance(self.payload, list):
            object.__setattr__(self, "payload", tuple(self.payload))
        elif not isinstance(self.payload, tuple) and not callable(self.payload):
            raise TypeError("payload must be a tuple or a callable")

    @property
    def is_lazy(self) -> bool:
        """True if the payload is a callable producing the message."""
        return callable(self.payload)
