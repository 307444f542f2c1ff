from __future__ import annotations

import threading
import time
from typing import Iterable

from gamewatch.errors import FetchError, FilterError, PublishError
from gamewatch.pbp.schema import PlayByPlayBundle


def make_bundle(
    active: bool = True,
    *,
    plays: Iterable[str] = ("jump ball",),
    visiting: str = "BOS",
    home: str = "LAL",
    game_id: str = "0012300001",
) -> PlayByPlayBundle:
    return PlayByPlayBundle.model_validate(
        {
            "gameId": game_id,
            "startTimeUTC": "2024-01-05T00:30:00Z",
            "vTeam": {"teamId": "1610612738", "triCode": visiting},
            "hTeam": {"teamId": "1610612747", "triCode": home},
            "period": {"Current": 1},
            "isGameActivated": active,
            "Plays": [
                {"clock": "12:00", "description": text, "formatted": {"description": text}}
                for text in plays
            ],
        }
    )


class FakeUpstreamClient:
    """Scripted stand-in for UpstreamClient that records every call."""

    def __init__(
        self,
        fetches: list[PlayByPlayBundle | Exception] | None = None,
        *,
        filter_error: Exception | None = None,
        publish_error: Exception | None = None,
        repeat_last: bool = True,
    ) -> None:
        self._fetches = list(fetches or [])
        self._index = 0
        self.filter_error = filter_error
        self.publish_error = publish_error
        self.repeat_last = repeat_last
        self.calls: list[tuple[str, object]] = []
        self.fetch_times: list[float] = []
        self.publish_times: list[float] = []
        self._lock = threading.Lock()

    def set_fetches(self, fetches: list[PlayByPlayBundle | Exception]) -> None:
        with self._lock:
            self._fetches = list(fetches)
            self._index = 0

    def fetch_play_by_play(self, code: str) -> PlayByPlayBundle:
        with self._lock:
            self.calls.append(("fetch", code))
            self.fetch_times.append(time.monotonic())
            if self._index < len(self._fetches):
                item = self._fetches[self._index]
                self._index += 1
            elif self.repeat_last and self._fetches:
                item = self._fetches[-1]
            else:
                item = FetchError("no scripted response", code=code)
        if isinstance(item, Exception):
            raise item
        return item

    def filter_play_by_play(self, bundle: PlayByPlayBundle, code: str | None = None) -> PlayByPlayBundle:
        with self._lock:
            self.calls.append(("filter", bundle))
        if self.filter_error is not None:
            raise self.filter_error
        return bundle.model_copy(update={"plays": bundle.plays[-1:]})

    def publish(self, bundle: PlayByPlayBundle, code: str | None = None) -> None:
        with self._lock:
            self.calls.append(("publish", bundle))
            self.publish_times.append(time.monotonic())
        if self.publish_error is not None:
            raise self.publish_error

    def stages(self) -> list[str]:
        with self._lock:
            return [stage for stage, _ in self.calls]

    def fetched_codes(self) -> list[str]:
        with self._lock:
            return [arg for stage, arg in self.calls if stage == "fetch"]


__all__ = [
    "FakeUpstreamClient",
    "FetchError",
    "FilterError",
    "PublishError",
    "make_bundle",
]
