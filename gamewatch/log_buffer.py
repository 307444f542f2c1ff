"""In-memory circular buffer log handler backing the /api/logs endpoint."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone
from dataclasses import dataclass, asdict

# Poller failures are only visible here and in the process logs.
WATCHED_LOGGERS = (
    "gamewatch.main",
    "gamewatch.activation",
    "gamewatch.pbp.poller",
    "gamewatch.pbp.client",
)


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    level: str
    logger: str
    message: str


class BufferHandler(logging.Handler):
    """Keeps the newest *maxlen* gamewatch records for the logs endpoint."""

    def __init__(self, maxlen: int = 500) -> None:
        super().__init__()
        self._buffer: deque[LogEntry] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            created = datetime.fromtimestamp(record.created, tz=timezone.utc)
            self._buffer.append(
                LogEntry(
                    timestamp=created.isoformat(timespec="seconds"),
                    level=record.levelname,
                    logger=record.name,
                    message=self.format(record),
                )
            )
        except Exception:
            self.handleError(record)

    def entries(
        self,
        limit: int = 100,
        level: str | None = None,
        source: str | None = None,
    ) -> list[dict]:
        """Newest-first entries, optionally narrowed to one level and a logger prefix."""
        items = list(self._buffer)
        if level:
            wanted = level.upper()
            items = [e for e in items if e.level == wanted]
        if source:
            items = [e for e in items if e.logger == source or e.logger.startswith(source + ".")]
        items = items[-limit:] if limit > 0 else []
        items.reverse()
        return [asdict(e) for e in items]


_handler: BufferHandler | None = None


def get_buffer_handler() -> BufferHandler:
    """Return (and lazily create) the process-wide BufferHandler."""
    global _handler
    if _handler is None:
        _handler = BufferHandler()
        _handler.setFormatter(logging.Formatter("%(message)s"))
        _handler.setLevel(logging.INFO)
    return _handler


def install_buffer_handler() -> BufferHandler:
    handler = get_buffer_handler()
    for name in WATCHED_LOGGERS:
        watched = logging.getLogger(name)
        if handler not in watched.handlers:
            watched.addHandler(handler)
        if watched.level == logging.NOTSET or watched.level > logging.INFO:
            watched.setLevel(logging.INFO)
    return handler
