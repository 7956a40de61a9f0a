"""Construction-time validation errors for Connection building.

These are configuration mistakes, not runtime conditions: they are raised
synchronously by the factory before any session is created.
"""

from __future__ import annotations


class ConnectionConfigError(ValueError):
    """Base class for connection validation failures."""


class MissingHostError(ConnectionConfigError):
    """Raised when no host is provided."""


class MissingAppError(ConnectionConfigError):
    """Raised when no application name can be resolved."""


class MissingTimeoutError(ConnectionConfigError):
    """Raised when no positive total timeout is provided."""


class MissingOpenTimeoutError(ConnectionConfigError):
    """Raised when the open timeout is explicitly unset or not positive."""


class MissingEnvError(ConnectionConfigError):
    """Raised when no environment can be resolved."""
