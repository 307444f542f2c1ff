"""Fire-and-forget launch and bookkeeping of per-game pollers."""

from __future__ import annotations

import asyncio
import logging

from gamewatch.pbp.client import UpstreamClient
from gamewatch.pbp.poller import Poller, PollerState, PollResult
from gamewatch.registry import GameRegistry

logger = logging.getLogger(__name__)


class ActivationService:
    """Starts at most one background poller per game code."""

    def __init__(
        self,
        registry: GameRegistry,
        client: UpstreamClient,
        poll_interval_seconds: float,
    ) -> None:
        self.registry = registry
        self.client = client
        self.poll_interval_seconds = poll_interval_seconds
        self._pollers: dict[str, Poller] = {}
        self._tasks: dict[str, asyncio.Task] = {}

    def activate(self, code: str) -> bool:
        """Launch a poller for *code* unless one already owns it.

        Must be called from the running event loop. Returns immediately; True
        when a new poller was launched.
        """
        if not self.registry.try_activate(code):
            logger.info("Already activated %s", code)
            return False

        poller = Poller(
            code,
            registry=self.registry,
            client=self.client,
            poll_interval_seconds=self.poll_interval_seconds,
        )
        try:
            self._spawn(poller)
        except RuntimeError:
            self.registry.deactivate(code)
            raise
        logger.info("Now activating %s", code)
        return True

    def _spawn(self, poller: Poller) -> asyncio.Task:
        task = asyncio.create_task(poller.run(), name=f"poller:{poller.code}")
        self._pollers[poller.code] = poller
        self._tasks[poller.code] = task
        task.add_done_callback(lambda t, code=poller.code: self._on_poller_done(code, t))
        return task

    def _on_poller_done(self, code: str, task: asyncio.Task) -> None:
        owned = self._tasks.get(code) is task
        if owned:
            self._tasks.pop(code, None)
            self._pollers.pop(code, None)
        if task.cancelled() or task.exception() is not None:
            # A task cancelled before its first step never reaches the poller's finally.
            if owned:
                self.registry.deactivate(code)
            if task.cancelled():
                logger.warning("Poller task cancelled code=%s", code)
            else:
                exc = task.exception()
                logger.error("Poller crashed code=%s: %s", code, exc, exc_info=exc)
            return
        result: PollResult = task.result()
        logger.debug("Poller finished code=%s outcome=%s", code, result.outcome.value)

    def list_active(self) -> list[str]:
        return sorted(self.registry.list_active())

    def running(self) -> dict[str, asyncio.Task]:
        return dict(self._tasks)

    def cancel(self, code: str) -> bool:
        """Ask the poller for *code* to stop at its next interval wait."""
        poller = self._pollers.get(code)
        task = self._tasks.get(code)
        if poller is None or task is None or task.done() or poller.state is PollerState.STOPPED:
            return False
        logger.info("Stop requested code=%s", code)
        poller.stop()
        return True

    async def shutdown(self) -> None:
        tasks = list(self._tasks.values())
        if not tasks:
            return
        logger.info("Stopping %d poller(s)", len(tasks))
        for poller in list(self._pollers.values()):
            poller.stop()
        await asyncio.gather(*tasks, return_exceptions=True)
