"""Audit log for file system mutations.

Every ``FileSystem`` owns a logger that records what changed in the
tree and what the executor did with exported files.  The log lives in
memory, like the tree itself, so nothing touches the real disk:

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — one immutable record (level, message, source).
- **Logger** — a bounded, append-only buffer with filtering.

A long-lived tree can see millions of writes, so the buffer may be
capped with ``max_entries``; the oldest entries fall off first, the
same way the kernel ring buffer behind ``dmesg`` forgets early boot
messages.
"""

from collections import deque
from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity levels for log entries.

    IntEnum members compare with ``<`` / ``>``, which is all that
    minimum-level filtering needs.
    """

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: What happened, usually naming the path involved.
        source: The subsystem that generated the event (``"fs"`` or ``"exec"``).

    """

    level: LogLevel
    message: str
    source: str

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Append-only log buffer with optional size cap."""

    def __init__(self, *, max_entries: int | None = None) -> None:
        """Create an empty logger.

        Args:
            max_entries: Keep at most this many entries (``None`` = unbounded).

        Raises:
            ValueError: If *max_entries* is not positive.

        """
        if max_entries is not None and max_entries <= 0:
            msg = f"max_entries must be positive, got {max_entries}"
            raise ValueError(msg)
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)

    @property
    def entries(self) -> list[LogEntry]:
        """Return the retained entries, oldest first."""
        return list(self._entries)

    def log(self, level: LogLevel, message: str, *, source: str) -> None:
        """Append a new entry, evicting the oldest one when full."""
        self._entries.append(LogEntry(level=level, message=message, source=source))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching every given criterion.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        """
        return [
            entry
            for entry in self._entries
            if (min_level is None or entry.level >= min_level)
            and (source is None or entry.source == source)
        ]

    def lines(self) -> list[str]:
        """Return every retained entry formatted as a log line."""
        return [str(entry) for entry in self._entries]

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
