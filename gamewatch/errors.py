"""Typed failures raised by the upstream client and the HTTP layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gamewatch.pbp.schema import GameSnapshot


class UpstreamError(RuntimeError):
    stage = "upstream"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class FetchError(UpstreamError):
    stage = "fetch"


class FilterError(UpstreamError):
    stage = "filter"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        snapshot: GameSnapshot | None = None,
    ) -> None:
        super().__init__(message, code=code)
        # The unfiltered snapshot, so callers can still see whether the game ended.
        self.snapshot = snapshot


class PublishError(UpstreamError):
    stage = "publish"


class EncodingError(RuntimeError):
    pass
