"""Server-side Starlette middleware for caller attribution and sunsets."""

from __future__ import annotations

import logging
import threading
from datetime import date, datetime, time, timezone
from email.utils import format_datetime
from typing import Any, Awaitable, Callable, Iterable, TypeVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from .client import SUNSET_HEADER

logger = logging.getLogger("wecall.server")

Endpoint = TypeVar("Endpoint", bound=Callable[..., Any])
CallNext = Callable[[Request], Awaitable[Response]]


def _as_utc(when: datetime | date) -> datetime:
    if not isinstance(when, datetime):
        when = datetime.combine(when, time.min)
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc)


def format_sunset(when: datetime | date) -> str:
    """Format ``when`` as an HTTP-date, e.g. ``Sat, 31 Dec 2022 23:59:59 GMT``."""
    return format_datetime(_as_utc(when), usegmt=True)


class AppNameLoggingMiddleware(BaseHTTPMiddleware):
    """Log the calling application declared by request headers."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        user_agent = request.headers.get("user-agent")
        if user_agent:
            app_name = request.headers.get("x-app-name", "")
            logger.info("user_agent=%s; app_name=%s;", user_agent, app_name)
        return await call_next(request)


class DeprecationRegistry:
    """Sunset dates for deprecated routes.

    Routes are registered either by endpoint (see :meth:`deprecate`) or by
    method and path. Lookups prefer the endpoint the router matched.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_endpoint: dict[Any, datetime] = {}
        self._by_route: dict[tuple[str, str], datetime] = {}

    def register(
        self,
        path: str,
        sunset: datetime | date,
        methods: Iterable[str] = ("GET",),
    ) -> None:
        when = _as_utc(sunset)
        with self._lock:
            for method in methods:
                self._by_route[(method.upper(), path)] = when

    def deprecate(
        self, sunset: datetime | date
    ) -> Callable[[Endpoint], Endpoint]:
        """Decorator marking an endpoint with a sunset date."""
        when = _as_utc(sunset)

        def decorator(endpoint: Endpoint) -> Endpoint:
            with self._lock:
                self._by_endpoint[endpoint] = when
            return endpoint

        return decorator

    def lookup(
        self, method: str, path: str, endpoint: Any = None
    ) -> datetime | None:
        if endpoint is not None:
            when = self._by_endpoint.get(endpoint)
            if when is not None:
                return when
        return self._by_route.get((method.upper(), path))


class SunsetMiddleware(BaseHTTPMiddleware):
    """Add a ``Sunset`` header to responses of deprecated routes."""

    def __init__(self, app: ASGIApp, registry: DeprecationRegistry) -> None:
        super().__init__(app)
        self.registry = registry

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        response = await call_next(request)
        # The router records the matched endpoint in the shared scope.
        sunset = self.registry.lookup(
            request.method,
            request.url.path,
            request.scope.get("endpoint"),
        )
        if sunset is not None and SUNSET_HEADER not in response.headers:
            response.headers[SUNSET_HEADER] = format_sunset(sunset)
        return response
