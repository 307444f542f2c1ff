"""CLI entrypoint that follows a single game in the foreground."""

from __future__ import annotations

import argparse
import asyncio
import logging

from gamewatch.pbp.client import UpstreamClient
from gamewatch.pbp.poller import Poller, PollOutcome, PollResult
from gamewatch.registry import GameRegistry
from gamewatch.settings import get_settings


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch, filter and publish play-by-play for one game until it ends.",
    )
    parser.add_argument("code", type=str, help="Game code to follow.")
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between polls (default: GAMEWATCH_POLL_INTERVAL_SECONDS).",
    )
    return parser.parse_args(argv)


def run_game(code: str, interval: float | None = None, client: UpstreamClient | None = None) -> PollResult:
    settings = get_settings()
    poller = Poller(
        code,
        registry=GameRegistry(),
        client=client or UpstreamClient(settings),
        poll_interval_seconds=interval if interval is not None else settings.poll_interval_seconds,
    )
    return asyncio.run(poller.run())


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    args = _parse_args(argv)
    code = args.code.strip()
    if not code:
        raise SystemExit("Game code must not be empty.")
    if args.interval is not None and args.interval <= 0:
        raise SystemExit("--interval must be > 0")

    logging.info("Following game code=%s", code)
    result = run_game(code, args.interval)
    logging.info(
        "Done: code=%s outcome=%s cycles=%s",
        result.code,
        result.outcome.value,
        result.cycles,
    )
    if result.outcome is not PollOutcome.COMPLETED:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
