"""Connection construction for service-to-service HTTP calls.

Every Connection carries the caller's identity (``User-Agent``,
``X-App-Name``), its environment (``X-App-Env``) and explicit timeouts.
Construction validates all of it up front and never touches the network;
requests issued later go straight through ``requests`` and its exceptions
reach the caller untouched.
"""

from __future__ import annotations

import logging
from numbers import Real
from types import MappingProxyType
from typing import Any, Callable, Mapping
from urllib.parse import urljoin, urlsplit

import requests
from requests.adapters import BaseAdapter

from ..middleware.client import DeprecationDetector
from .config import ConnectionConfig, get_default_config
from .errors import (
    MissingAppError,
    MissingEnvError,
    MissingHostError,
    MissingOpenTimeoutError,
    MissingTimeoutError,
)
from .probe import EnvironmentProbe, OsEnvironProbe

logger = logging.getLogger(__name__)

OPEN_TIMEOUT = 2

Customizer = Callable[[requests.Session], None]


class _Unset:
    """Marker distinguishing "not passed" from an explicit ``None``."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def _is_positive_number(value: Any) -> bool:
    return (
        isinstance(value, Real)
        and not isinstance(value, bool)
        and value > 0
    )


def _non_empty(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class Connection:
    """A configured HTTP session bound to one host.

    Headers and timeouts are fixed at construction; use the factory's
    ``customizer`` to change them before the Connection is handed out.
    """

    def __init__(
        self,
        session: requests.Session,
        *,
        host: str,
        app: str,
        env: str,
        timeout: float,
        open_timeout: float,
    ) -> None:
        self._session = session
        self._host = host
        self._app = app
        self._env = env
        self._options = MappingProxyType(
            {"timeout": timeout, "open_timeout": open_timeout}
        )

    def __repr__(self) -> str:
        return (
            f"Connection(host={self._host!r}, app={self._app!r}, "
            f"env={self._env!r})"
        )

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def host(self) -> str:
        return self._host

    @property
    def app(self) -> str:
        return self._app

    @property
    def env(self) -> str:
        return self._env

    @property
    def headers(self) -> Mapping[str, str]:
        """Read-only snapshot of the headers sent with every request."""
        return MappingProxyType(dict(self._session.headers))

    @property
    def options(self) -> Mapping[str, float]:
        return self._options

    @property
    def timeout(self) -> float:
        return self._options["timeout"]

    @property
    def open_timeout(self) -> float:
        return self._options["open_timeout"]

    @property
    def hooks(self) -> tuple[Callable[..., Any], ...]:
        """Response hooks in the order ``requests`` runs them."""
        return tuple(self._session.hooks.get("response", ()))

    def adapter_for(self, url: str | None = None) -> BaseAdapter:
        """Return the transport adapter used for ``url`` (default: host)."""
        return self._session.get_adapter(url or self.url_for(""))

    def url_for(self, path: str) -> str:
        """Resolve ``path`` against the host.

        Absolute URLs are returned as-is, relative paths extend the host
        path and paths starting with ``/`` replace it.
        """
        if urlsplit(path).scheme:
            return path
        base = self._host if self._host.endswith("/") else self._host + "/"
        return urljoin(base, path)

    def _get_timeout(self, override: float | None) -> tuple[float, float]:
        """Resolve ``(connect, read)`` timeouts for one request."""
        if override is not None:
            if override <= 0:
                raise ValueError("timeout override must be > 0 when provided")
            return (self.open_timeout, override)
        return (self.open_timeout, self.timeout)

    def request(
        self,
        method: str,
        path: str = "",
        *,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> requests.Response:
        """Send a request to ``path`` relative to the host.

        Remaining keyword arguments go to :meth:`requests.Session.request`.
        Connect timeouts raise ``requests.exceptions.ConnectTimeout``; slow
        responses raise ``requests.exceptions.ReadTimeout``.
        """
        return self._session.request(
            method.upper(),
            self.url_for(path),
            timeout=self._get_timeout(timeout),
            **kwargs,
        )

    def get(self, path: str = "", **kwargs: Any) -> requests.Response:
        return self.request("GET", path, **kwargs)

    def head(self, path: str = "", **kwargs: Any) -> requests.Response:
        return self.request("HEAD", path, **kwargs)

    def post(self, path: str = "", **kwargs: Any) -> requests.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str = "", **kwargs: Any) -> requests.Response:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str = "", **kwargs: Any) -> requests.Response:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str = "", **kwargs: Any) -> requests.Response:
        return self.request("DELETE", path, **kwargs)

    def options_request(
        self, path: str = "", **kwargs: Any
    ) -> requests.Response:
        # ``options`` is taken by the timeout mapping.
        return self.request("OPTIONS", path, **kwargs)

    def close(self) -> None:
        self._session.close()


class ConnectionFactory:
    """Validate connection parameters and build Connections.

    Args:
        config: Pin a specific config. When omitted, ``config_provider`` is
            consulted on every ``create`` call.
        config_provider: Callable returning the fallback config; defaults to
            the process-wide default.
    """

    def __init__(
        self,
        config: ConnectionConfig | None = None,
        *,
        config_provider: Callable[[], ConnectionConfig] = get_default_config,
    ) -> None:
        self._config = config
        self._config_provider = config_provider

    @property
    def config(self) -> ConnectionConfig:
        if self._config is not None:
            return self._config
        return self._config_provider()

    def create(
        self,
        host: str | None = None,
        *,
        app: str | None = None,
        env: str | None = None,
        timeout: float | None = None,
        open_timeout: float | None = UNSET,
        customizer: Customizer | None = None,
    ) -> Connection:
        """Build a Connection, or raise before anything is constructed.

        Checks run in order: host, app, timeout, open timeout, env. An
        omitted ``open_timeout`` defaults to ``OPEN_TIMEOUT``; an explicit
        ``None`` is rejected.
        """
        config = self.config
        probe: EnvironmentProbe = config.probe or OsEnvironProbe()

        host = _non_empty(host)
        if host is None:
            raise MissingHostError("host is required")

        resolved_app = (
            _non_empty(app)
            or _non_empty(config.app_name)
            or _non_empty(probe.detect_app_name())
        )
        if resolved_app is None:
            raise MissingAppError(
                "app is required: pass app=, configure app_name or set APP_NAME"
            )

        if not _is_positive_number(timeout):
            raise MissingTimeoutError(
                f"timeout must be a positive number of seconds, got {timeout!r}"
            )

        if open_timeout is UNSET:
            open_timeout = OPEN_TIMEOUT
        elif not _is_positive_number(open_timeout):
            raise MissingOpenTimeoutError(
                "open_timeout must be a positive number of seconds, "
                f"got {open_timeout!r}"
            )

        resolved_env = (
            _non_empty(env)
            or _non_empty(config.app_env)
            or _non_empty(probe.detect_environment())
        )
        if resolved_env is None:
            raise MissingEnvError(
                "env is required: pass env=, configure app_env or set APP_ENV"
            )

        session = requests.Session()
        session.headers["User-Agent"] = resolved_app
        session.headers["X-App-Name"] = resolved_app
        session.headers["X-App-Env"] = resolved_env

        if config.detect_deprecations:
            session.hooks["response"].append(
                DeprecationDetector(config.deprecation_notifier)
            )

        if customizer is not None:
            customizer(session)

        logger.debug(
            "Built connection host=%s app=%s env=%s timeout=%s open_timeout=%s",
            host,
            resolved_app,
            resolved_env,
            timeout,
            open_timeout,
        )
        return Connection(
            session,
            host=host,
            app=resolved_app,
            env=resolved_env,
            timeout=timeout,
            open_timeout=open_timeout,
        )


def create_connection(
    host: str | None = None,
    *,
    config: ConnectionConfig | None = None,
    **params: Any,
) -> Connection:
    """Shortcut for ``ConnectionFactory(config).create(host, **params)``."""
    return ConnectionFactory(config).create(host, **params)
