"""HTTP client for the play-by-play fetch, filter and publish services."""

from __future__ import annotations

import json
import logging
from typing import Any

import requests
from pydantic import ValidationError

from gamewatch.errors import FetchError, FilterError, PublishError
from gamewatch.pbp.schema import PlayByPlayBundle
from gamewatch.settings import Settings

logger = logging.getLogger(__name__)

MAX_ERROR_SNIPPET = 300
_DECODER = json.JSONDecoder()


def _truncate(value: str, limit: int = MAX_ERROR_SNIPPET) -> str:
    if len(value) <= limit:
        return value
    return value[:limit] + "...<truncated>"


def decode_last_value(body: str) -> Any:
    """Decode a stream of concatenated JSON values and return the last one.

    Raises ValueError when the body is empty or any value is malformed.
    """
    last: Any = None
    found = False
    index = 0
    length = len(body)
    while True:
        while index < length and body[index].isspace():
            index += 1
        if index >= length:
            break
        last, index = _DECODER.raw_decode(body, index)
        found = True
    if not found:
        raise ValueError("empty response body")
    return last


def _decode_bundle(body: str) -> PlayByPlayBundle:
    value = decode_last_value(body)
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return PlayByPlayBundle.model_validate(value)


class UpstreamClient:
    """Blocking, retry-free calls to the three upstream services.

    Stateless apart from configuration, so one instance can be shared by
    every poller thread.
    """

    def __init__(self, settings: Settings) -> None:
        self.fetch_base_url = settings.fetch_base_url
        self.filter_base_url = settings.filter_base_url
        self.publish_base_url = settings.publish_base_url
        self.timeout = (settings.connect_timeout_seconds, settings.read_timeout_seconds)

    def fetch_play_by_play(self, code: str) -> PlayByPlayBundle:
        url = f"{self.fetch_base_url}/pbp/{code}"
        try:
            response = requests.get(
                url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise FetchError(f"PBP request failed: {exc}", code=code) from exc

        if response.status_code >= 400:
            raise FetchError(
                f"PBP service error {response.status_code}: {_truncate(response.text)}",
                code=code,
            )
        try:
            bundle = _decode_bundle(response.text)
        except (ValueError, ValidationError) as exc:
            raise FetchError(f"PBP response could not be decoded: {exc}", code=code) from exc

        logger.debug(
            "Fetched pbp code=%s active=%s plays=%d",
            code,
            bundle.active,
            len(bundle.plays),
        )
        return bundle

    def filter_play_by_play(self, bundle: PlayByPlayBundle, code: str | None = None) -> PlayByPlayBundle:
        """Filter *bundle*; errors report *code* (the activation code) when given."""
        game_code = bundle.game_code
        code = code or game_code
        url = f"{self.filter_base_url}/filter/{game_code}"
        snapshot = bundle.snapshot()
        try:
            response = requests.post(url, json=bundle.to_wire(), timeout=self.timeout)
        except requests.RequestException as exc:
            raise FilterError(
                f"Filter request to {url} failed: {exc}",
                code=code,
                snapshot=snapshot,
            ) from exc

        if response.status_code >= 400:
            raise FilterError(
                f"Filter service error {response.status_code}: {_truncate(response.text)}",
                code=code,
                snapshot=snapshot,
            )
        try:
            filtered = _decode_bundle(response.text)
        except (ValueError, ValidationError) as exc:
            raise FilterError(
                f"Filter response could not be decoded: {exc}",
                code=code,
                snapshot=snapshot,
            ) from exc

        logger.debug(
            "Filtered pbp code=%s key=%s plays=%d->%d",
            code,
            game_code,
            len(bundle.plays),
            len(filtered.plays),
        )
        return filtered

    def publish(self, bundle: PlayByPlayBundle, code: str | None = None) -> None:
        code = code or bundle.game_code
        url = f"{self.publish_base_url}/tweet"
        try:
            response = requests.post(url, json=bundle.to_wire(), timeout=self.timeout)
        except requests.RequestException as exc:
            raise PublishError(f"Publish request failed: {exc}", code=code) from exc

        if response.status_code >= 400:
            raise PublishError(
                f"Publish service error {response.status_code}",
                code=code,
            )
        logger.debug("Published code=%s plays=%d", code, len(bundle.plays))
