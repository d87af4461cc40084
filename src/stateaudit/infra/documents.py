"""Fetch JSON documents from an HTTP(S) URL or a local path."""

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from stateaudit.exceptions import ExternalServiceError
from stateaudit.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def join_source(base: str, name: str) -> str:
    if is_remote(base):
        return f"{base.rstrip('/')}/{name}"
    return str(Path(base) / name)


def load_json_document(source: str, http_client: RateLimitedClient | None = None) -> Any:
    """Load and decode one JSON document. Any failure becomes ExternalServiceError."""
    if is_remote(source):
        if http_client is None:
            raise ExternalServiceError(f"No HTTP client configured to fetch {source}")
        try:
            resp = http_client.get(source)
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Request to {source} failed: {e}") from e
        if resp.status_code != 200:
            raise ExternalServiceError(f"{source} returned HTTP {resp.status_code}")
        text = resp.text
    else:
        try:
            text = Path(source).read_text()
        except OSError as e:
            raise ExternalServiceError(f"Cannot read {source}: {e}") from e

    try:
        document = json.loads(text)
    except ValueError as e:
        raise ExternalServiceError(f"{source} is not valid JSON: {e}") from e

    logger.debug("Loaded document %s", source)
    return document
