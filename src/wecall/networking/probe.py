"""Best-effort detection of the calling application's identity."""

from __future__ import annotations

import os
from typing import Mapping, Protocol

APP_NAME_VARIABLES = ("APP_NAME", "SERVICE_NAME")
ENVIRONMENT_VARIABLES = (
    "APP_ENV",
    "ENVIRONMENT",
    "PYTHON_ENV",
    "RACK_ENV",
    "RAILS_ENV",
)


class EnvironmentProbe(Protocol):
    """Source of last-resort values for app name and environment."""

    def detect_app_name(self) -> str | None: ...

    def detect_environment(self) -> str | None: ...


def _first_set(environ: Mapping[str, str], names: tuple[str, ...]) -> str | None:
    for name in names:
        value = environ.get(name, "").strip()
        if value:
            return value
    return None


class OsEnvironProbe:
    """Probe reading process environment variables.

    Only explicit settings count: the interpreter's ``__main__`` names the
    launcher (uvicorn, gunicorn, pytest), not the service.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def detect_app_name(self) -> str | None:
        return _first_set(self._environ, APP_NAME_VARIABLES)

    def detect_environment(self) -> str | None:
        return _first_set(self._environ, ENVIRONMENT_VARIABLES)
