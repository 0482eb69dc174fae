"""Interpreter audit log.

The logger records structured entries for what the interpreter did:
each dispatched command, each unrecognized name, each failure a
command reported, and the fatal error that ended the process.

- **LogLevel** — severity levels (DEBUG < ERROR).
- **LogEntry** — a single structured record (level, message, source).
- **Logger** — a bounded ring of the most recent entries.

The log lives in memory only and keeps the last ``max_entries``
records, so a long interactive session does not grow it without
limit.  The entry point prints the entry that explains a fatal exit.
"""

from collections import deque
from dataclasses import dataclass
from enum import IntEnum

DEFAULT_MAX_ENTRIES = 256


class LogLevel(IntEnum):
    """Severity levels for log entries."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The part of the interpreter that generated the event
            (``"shell"``, ``"repl"`` or a command name).

    """

    level: LogLevel
    message: str
    source: str

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Keep the most recent log entries, oldest first."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        """Create an empty logger holding at most *max_entries* records.

        Raises:
            ValueError: If *max_entries* is not positive.

        """
        if max_entries <= 0:
            msg = f"max_entries must be positive, got {max_entries}"
            raise ValueError(msg)
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)

    @property
    def entries(self) -> list[LogEntry]:
        """Return the retained entries in chronological order."""
        return list(self._entries)

    def log(self, level: LogLevel, message: str, *, source: str) -> LogEntry:
        """Append a new entry, dropping the oldest if full, and return it."""
        entry = LogEntry(level=level, message=message, source=source)
        self._entries.append(entry)
        return entry
