"""
Error taxonomy for the data-access layer.

ConfigError is fatal at startup. AuthError is retryable by calling
SessionManager.ensure_authenticated() again. FetchError subclasses are
recoverable: callers show an empty/error state and may retry.
"""

from __future__ import annotations


class PocketLearnError(Exception):
    """Base class for every error raised by pocketlearn."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConfigError(PocketLearnError):
    """Raised when the backend host or credentials are missing."""
    pass


# ========================================
# Authentication
# ========================================


class AuthError(PocketLearnError):
    """Authentication exchange failed."""
    pass


class InvalidCredentialsError(AuthError):
    """The backend rejected the configured principal/secret."""
    pass


class AuthNetworkError(AuthError):
    """The authentication exchange could not complete (transport or server failure)."""
    pass


# ========================================
# Retrieval
# ========================================


class FetchError(PocketLearnError):
    """A collection or record fetch failed."""
    pass


class UnauthorizedError(FetchError):
    """No valid session: authentication failed or the backend rejected the token."""
    pass


class RecordNotFoundError(FetchError):
    """The requested record (or collection) does not exist."""
    pass


class FetchNetworkError(FetchError):
    """Transport failure, timeout or unexpected HTTP status."""
    pass


class MalformedResponseError(FetchError):
    """The backend answered with a body that does not have the expected shape."""
    pass
