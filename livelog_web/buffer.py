"""Append-only in-memory store of captured log lines."""

from __future__ import annotations

import bisect
import enum
import threading
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

TICKS_PER_MILLISECOND = 10_000
UNPRINTABLE_MESSAGE = "<unprintable message>"


def now_ticks() -> int:
    """Current time in 100ns ticks since the Unix epoch."""

    return time.time_ns() // 100


class LogLevel(str, enum.Enum):
    MESSAGE = "Message"
    WARNING = "Warning"
    ERROR = "Error"

    @classmethod
    def parse(cls, value: Union["LogLevel", str, None]) -> Optional["LogLevel"]:
        if isinstance(value, LogLevel):
            return value
        try:
            name = str(value).strip().lower() if value else ""
        except Exception:  # pylint: disable=broad-except
            return None
        return _LEVEL_LOOKUP.get(name) if name else None


_LEVEL_LOOKUP: Dict[str, LogLevel] = {level.value.lower(): level for level in LogLevel}


@dataclass(frozen=True)
class LogEntry:
    timestamp_ticks: int
    level: LogLevel
    message: str

    def as_dict(self) -> Dict[str, object]:
        return {
            "TimestampTicks": self.timestamp_ticks,
            "Level": self.level.value,
            "Message": self.message,
        }


def _ticks_of(entry: LogEntry) -> int:
    return entry.timestamp_ticks


def _as_text(message: object) -> str:
    if message is None:
        return ""
    if isinstance(message, str):
        return message
    try:
        return str(message)
    except Exception:  # pylint: disable=broad-except
        pass
    try:
        return repr(message)
    except Exception:  # pylint: disable=broad-except
        return UNPRINTABLE_MESSAGE


class LogBuffer:
    """Thread-safe, unbounded, append-only sequence of :class:`LogEntry`.

    Timestamps are assigned here, under the lock, so stored entries are
    strictly increasing even when the wall clock stalls or steps back.
    """

    def __init__(self) -> None:
        self._entries: List[LogEntry] = []
        self._lock = threading.Lock()
        self._last_ticks = 0

    def record(self, level: Union[LogLevel, str], message: object) -> None:
        resolved = LogLevel.parse(level) or LogLevel.MESSAGE
        text = _as_text(message)
        with self._lock:
            ticks = now_ticks()
            if ticks <= self._last_ticks:
                ticks = self._last_ticks + 1
            self._last_ticks = ticks
            self._entries.append(LogEntry(ticks, resolved, text))

    def query_since(self, cursor: int = 0, level: Union[LogLevel, str, None] = None) -> List[LogEntry]:
        """Return entries newer than ``cursor`` in append order.

        ``level`` is compared case-insensitively; a name that matches no level
        yields an empty result.
        """

        with self._lock:
            start = bisect.bisect_right(self._entries, cursor, key=_ticks_of)
            snapshot = self._entries[start:]
        if level is None or level == "":
            return snapshot
        wanted = LogLevel.parse(level)
        if wanted is None:
            return []
        return [entry for entry in snapshot if entry.level is wanted]

    def latest_ticks(self) -> int:
        with self._lock:
            return self._entries[-1].timestamp_ticks if self._entries else 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = [
    "LogBuffer",
    "LogEntry",
    "LogLevel",
    "TICKS_PER_MILLISECOND",
    "now_ticks",
]
