"""Run the gamewatch HTTP service."""

from __future__ import annotations

import argparse
import logging

import uvicorn

from gamewatch.settings import get_settings


def _parse_args(default_port: int) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the game activation API.")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Bind address.")
    parser.add_argument(
        "--port",
        type=int,
        default=default_port,
        help=f"Listen port (default: {default_port}, from GAMEWATCH_LISTEN_PORT).",
    )
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    settings = get_settings()
    args = _parse_args(settings.listen_port)
    uvicorn.run("gamewatch.main:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
