"""Configuration models for Connection construction."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from ..middleware.notifiers import Notifier
    from .probe import EnvironmentProbe

TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})


def _bool_env(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY_VALUES


@dataclass(frozen=True)
class ConnectionConfig:
    """Defaults shared by every Connection built from it.

    Explicit arguments to the factory always win over these values; they
    in turn win over whatever the environment probe detects.
    """

    app_name: str | None = None
    app_env: str | None = None
    detect_deprecations: bool = True
    deprecation_notifier: Notifier | None = None
    probe: EnvironmentProbe | None = None

    def __post_init__(self) -> None:
        if self.app_name is not None and not self.app_name.strip():
            raise ValueError("app_name must be non-empty when provided")
        if self.app_env is not None and not self.app_env.strip():
            raise ValueError("app_env must be non-empty when provided")

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None
    ) -> ConnectionConfig:
        """Build a config from ``WECALL_*`` environment variables."""
        environ = os.environ if environ is None else environ
        return cls(
            app_name=environ.get("WECALL_APP_NAME") or None,
            app_env=environ.get("WECALL_APP_ENV") or None,
            detect_deprecations=_bool_env(
                environ, "WECALL_DETECT_DEPRECATIONS", True
            ),
        )


# The process-wide default is an immutable snapshot; writers swap it whole.
_default_lock = threading.Lock()
_default_config = ConnectionConfig()


def get_default_config() -> ConnectionConfig:
    """Return the current process-wide default config."""
    return _default_config


def configure(**changes: Any) -> ConnectionConfig:
    """Replace fields of the process-wide default config.

    Intended for application start-up. Connections already built keep the
    snapshot they were created with.
    """
    global _default_config
    with _default_lock:
        _default_config = replace(_default_config, **changes)
        return _default_config


def reset_default_config() -> None:
    """Restore the process-wide default config to its initial state."""
    global _default_config
    with _default_lock:
        _default_config = ConnectionConfig()
