from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)
_SETTINGS: Settings | None = None

DEFAULT_FETCH_BASE_URL = "http://localhost:8081"
DEFAULT_FILTER_BASE_URL = "http://localhost:8082"
DEFAULT_PUBLISH_BASE_URL = "http://localhost:8083"
DEFAULT_LISTEN_PORT = 8084
DEFAULT_POLL_INTERVAL_SECONDS = 10.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 5.0
DEFAULT_READ_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class Settings:
    fetch_base_url: str = DEFAULT_FETCH_BASE_URL
    filter_base_url: str = DEFAULT_FILTER_BASE_URL
    publish_base_url: str = DEFAULT_PUBLISH_BASE_URL
    listen_port: int = DEFAULT_LISTEN_PORT
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    read_timeout_seconds: float = DEFAULT_READ_TIMEOUT_SECONDS


def _env_url(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip()
    return (raw or default).rstrip("/")


def _env_number(name: str, default, cast):
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.error("Invalid %s=%r, using default %s", name, raw, default)
        return default
    if value <= 0:
        logger.error("%s must be > 0 (got %s), using default %s", name, value, default)
        return default
    return value


def load_settings() -> Settings:
    return Settings(
        fetch_base_url=_env_url("GAMEWATCH_FETCH_BASE_URL", DEFAULT_FETCH_BASE_URL),
        filter_base_url=_env_url("GAMEWATCH_FILTER_BASE_URL", DEFAULT_FILTER_BASE_URL),
        publish_base_url=_env_url("GAMEWATCH_PUBLISH_BASE_URL", DEFAULT_PUBLISH_BASE_URL),
        listen_port=_env_number("GAMEWATCH_LISTEN_PORT", DEFAULT_LISTEN_PORT, int),
        poll_interval_seconds=_env_number(
            "GAMEWATCH_POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS, float
        ),
        connect_timeout_seconds=_env_number(
            "GAMEWATCH_CONNECT_TIMEOUT_SECONDS", DEFAULT_CONNECT_TIMEOUT_SECONDS, float
        ),
        read_timeout_seconds=_env_number(
            "GAMEWATCH_READ_TIMEOUT_SECONDS", DEFAULT_READ_TIMEOUT_SECONDS, float
        ),
    )


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is not None:
        return _SETTINGS
    _SETTINGS = load_settings()
    logger.info(
        "Settings loaded: fetch=%s filter=%s publish=%s port=%s poll=%ss",
        _SETTINGS.fetch_base_url,
        _SETTINGS.filter_base_url,
        _SETTINGS.publish_base_url,
        _SETTINGS.listen_port,
        _SETTINGS.poll_interval_seconds,
    )
    return _SETTINGS
