"""In-memory set of game codes currently owned by a running poller."""

from __future__ import annotations

import threading
from datetime import datetime, timezone


class GameRegistry:
    """Lock-guarded mapping of game code -> time its poller claimed it.

    Every operation takes the same lock and returns immediately; callers must
    never hold it across network calls.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active: dict[str, datetime] = {}

    def is_active(self, code: str) -> bool:
        with self._lock:
            return code in self._active

    def activate(self, code: str) -> None:
        with self._lock:
            self._active.setdefault(code, datetime.now(timezone.utc))

    def try_activate(self, code: str) -> bool:
        """Mark *code* active if absent. True when the caller now owns it."""
        with self._lock:
            if code in self._active:
                return False
            self._active[code] = datetime.now(timezone.utc)
            return True

    def deactivate(self, code: str) -> None:
        with self._lock:
            self._active.pop(code, None)

    def list_active(self) -> set[str]:
        with self._lock:
            return set(self._active)

    def activated_at(self, code: str) -> datetime | None:
        with self._lock:
            return self._active.get(code)

    def __len__(self) -> int:
        with self._lock:
            return len(self._active)
