"""Small HTTP helpers shared by the providers."""

from __future__ import annotations

import json
import logging
from typing import Any, BinaryIO
from urllib.request import Request, urlopen

from app.config import get_app_config
from services.server_update.models import UpdateError


_LOGGER = logging.getLogger(__name__)

_overrides: dict[str, Any] = {}


def configure_http(*, user_agent: str | None = None, timeout: float | None = None) -> None:
    """Override the ``User-Agent`` and timeout taken from ``app.json``."""

    if user_agent:
        _overrides["user_agent"] = user_agent
    if timeout is not None and timeout > 0:
        _overrides["timeout"] = float(timeout)


def open_url(url: str) -> BinaryIO:
    """Issue a GET for ``url`` with a browser-like ``User-Agent`` header."""

    settings = get_app_config().http
    user_agent = _overrides.get("user_agent", settings.user_agent)
    timeout = _overrides.get("timeout", settings.timeout_seconds)
    request = Request(url, headers={"User-Agent": user_agent})
    _LOGGER.debug("GET %s", url)
    return urlopen(request, timeout=timeout)  # nosec - fixed HTTPS endpoints


def request_json(url: str) -> Any:
    """Return the decoded JSON body served at ``url``."""

    try:
        with open_url(url) as response:
            return json.load(response)
    except (OSError, ValueError) as exc:
        raise UpdateError(f"Failed to query {url}: {exc}") from exc


__all__ = ["configure_http", "open_url", "request_json"]
