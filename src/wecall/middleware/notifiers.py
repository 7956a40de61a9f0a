"""Sinks for deprecation warnings raised by the client middleware."""

from __future__ import annotations

import logging
import warnings
from typing import Protocol

DEPRECATION_LOGGER = "wecall.deprecations"


class Notifier(Protocol):
    def warn(self, message: str) -> None: ...


class LoggingNotifier:
    """Write deprecation warnings to a logger at WARNING level."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(DEPRECATION_LOGGER)

    def warn(self, message: str) -> None:
        self._logger.warning(message)


class WarningsNotifier:
    """Emit deprecation warnings through the :mod:`warnings` machinery.

    Lets the usual filters (``-W error::DeprecationWarning``, pytest's
    warning capture) decide what happens to them.
    """

    def __init__(self, category: type[Warning] = DeprecationWarning) -> None:
        self._category = category

    def warn(self, message: str) -> None:
        warnings.warn(message, self._category, stacklevel=2)
