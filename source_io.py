"""Reading a source feed from a URL or a local path."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlparse

import requests

from errors import SourceUnavailableError

REQUEST_TIMEOUT_SECONDS = 30

LOGGER = logging.getLogger(__name__)


def is_remote(location: str) -> bool:
    return urlparse(location).scheme.lower() in {"http", "https"}


def read_source(location: str) -> bytes:
    """Return the raw bytes behind ``location``.

    HTTP(S) locations are fetched once with ``requests``; anything else is
    treated as a filesystem path. There is no retry: a failed fetch raises
    SourceUnavailableError straight away.
    """
    if not location or not location.strip():
        raise SourceUnavailableError("No source location configured")

    location = location.strip()

    if is_remote(location):
        try:
            response = requests.get(location, timeout=REQUEST_TIMEOUT_SECONDS)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise SourceUnavailableError(f"Could not fetch {location}: {exc}") from exc

        LOGGER.info("Fetched source url=%s bytes=%s", location, len(response.content))
        return response.content

    try:
        data = Path(location).expanduser().read_bytes()
    except OSError as exc:
        raise SourceUnavailableError(f"Could not open {location}: {exc.strerror or exc}") from exc

    LOGGER.info("Read source path=%s bytes=%s", location, len(data))
    return data
