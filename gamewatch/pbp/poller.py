"""Per-game polling loop: fetch, filter, publish until the game ends."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from gamewatch.errors import UpstreamError
from gamewatch.pbp.client import UpstreamClient
from gamewatch.registry import GameRegistry

logger = logging.getLogger(__name__)


class PollerState(str, Enum):
    STARTING = "starting"
    POLLING = "polling"
    STOPPED = "stopped"


class PollOutcome(str, Enum):
    COMPLETED = "completed"
    FETCH_FAILED = "fetch_failed"
    FILTER_FAILED = "filter_failed"
    PUBLISH_FAILED = "publish_failed"
    UPSTREAM_FAILED = "upstream_failed"
    CANCELLED = "cancelled"


_FAILURE_OUTCOMES: dict[str, PollOutcome] = {
    "fetch": PollOutcome.FETCH_FAILED,
    "filter": PollOutcome.FILTER_FAILED,
    "publish": PollOutcome.PUBLISH_FAILED,
}


@dataclass
class PollResult:
    code: str
    outcome: PollOutcome
    cycles: int = 0
    error: str | None = None


class Poller:
    """Drives fetch -> filter -> publish for one game until it ends or a stage fails."""

    def __init__(
        self,
        code: str,
        *,
        registry: GameRegistry,
        client: UpstreamClient,
        poll_interval_seconds: float,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        self.code = code
        self.registry = registry
        self.client = client
        self.poll_interval_seconds = poll_interval_seconds
        self.stop_event = stop_event or asyncio.Event()
        self.state = PollerState.STARTING

    def stop(self) -> None:
        self.stop_event.set()

    async def run(self) -> PollResult:
        self.registry.activate(self.code)
        logger.info("Poller started code=%s interval=%ss", self.code, self.poll_interval_seconds)
        result = PollResult(code=self.code, outcome=PollOutcome.COMPLETED)
        try:
            self.state = PollerState.POLLING
            await self._poll(result)
        except UpstreamError as exc:
            result.outcome = _FAILURE_OUTCOMES.get(exc.stage, PollOutcome.UPSTREAM_FAILED)
            result.error = f"{type(exc).__name__}: {str(exc).strip() or '(no message)'}"
            logger.error(
                "Poller FAILED code=%s stage=%s cycles=%d: %s",
                self.code,
                exc.stage,
                result.cycles,
                result.error,
            )
        finally:
            self.state = PollerState.STOPPED
            self.registry.deactivate(self.code)

        logger.info(
            "Poller stopped code=%s outcome=%s cycles=%d",
            self.code,
            result.outcome.value,
            result.cycles,
        )
        return result

    async def _poll(self, result: PollResult) -> None:
        while True:
            # Always decide on a fresh fetch, never on the previous iteration's bundle.
            bundle = await asyncio.to_thread(self.client.fetch_play_by_play, self.code)
            filtered = await asyncio.to_thread(self.client.filter_play_by_play, bundle, code=self.code)
            await asyncio.to_thread(self.client.publish, filtered, code=self.code)
            result.cycles += 1
            logger.info(
                "Cycle %d done code=%s period=%s plays=%d published=%d active=%s",
                result.cycles,
                self.code,
                bundle.period.current,
                len(bundle.plays),
                len(filtered.plays),
                bundle.active,
            )

            if not bundle.active:
                logger.info("Game over code=%s after %d cycle(s)", self.code, result.cycles)
                return

            if await self._wait_interval():
                result.outcome = PollOutcome.CANCELLED
                logger.warning("Poller cancelled code=%s", self.code)
                return

    async def _wait_interval(self) -> bool:
        """Sleep for the poll interval. True when a stop was requested meanwhile."""
        try:
            await asyncio.wait_for(
                self.stop_event.wait(),
                timeout=self.poll_interval_seconds,
            )
        except asyncio.TimeoutError:
            return False
        return True
