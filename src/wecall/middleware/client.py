"""Client-side response middleware.

``DeprecationDetector`` is installed as a ``requests`` response hook. It
only observes: the response it is given is the response it returns.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import requests

from .notifiers import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)

SUNSET_HEADER = "Sunset"


def parse_sunset(value: str | None) -> datetime | None:
    """Parse a Sunset header value into an aware UTC datetime.

    Returns None for missing or malformed values.
    """
    if not value or not value.strip():
        return None
    try:
        parsed = parsedate_to_datetime(value.strip())
    except (TypeError, ValueError, IndexError):
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class DeprecationDetector:
    """Warn when a response announces a sunset date for its endpoint."""

    def __init__(self, notifier: Notifier | None = None) -> None:
        self.notifier = notifier or LoggingNotifier()

    def __call__(
        self, response: requests.Response, *args: Any, **kwargs: Any
    ) -> requests.Response:
        raw = response.headers.get(SUNSET_HEADER)
        if raw is None:
            return response

        sunset = parse_sunset(raw)
        if sunset is None:
            logger.debug("Ignoring unparseable Sunset header %r", raw)
            return response

        try:
            self.notifier.warn(self._message(response, raw, sunset))
        except Exception:
            logger.exception("Deprecation notifier failed for Sunset %r", raw)
        return response

    @staticmethod
    def _message(
        response: requests.Response, raw: str, sunset: datetime
    ) -> str:
        request = getattr(response, "request", None)
        method = getattr(request, "method", None) or "GET"
        url = getattr(request, "url", None) or response.url
        return (
            f"Endpoint {method} {url} is deprecated and will be removed "
            f"after {sunset.isoformat()} (Sunset: {raw})"
        )
