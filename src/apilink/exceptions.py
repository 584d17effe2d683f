"""Exception hierarchy for apilink.

The request functions of :class:`~apilink.api.ApiClient` never raise: a
failed call comes back as a :class:`~apilink.models.ResponseEnvelope` whose
``error`` holds the transport exception. The classes below cover everything
outside that contract (configuration files, profiles, CLI usage) and give
the CLI a single place to turn failures into exit codes.

Subclass hierarchy::

    ApilinkError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- AuthError           (exit 3)
    +-- NotFoundError       (exit 4)
    +-- ServerError         (exit 5)
    +-- ConnectionError_    (exit 6)
    +-- ConfigError         (exit 1)
"""

from __future__ import annotations

import httpx

from apilink.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class ApilinkError(Exception):
    """Base exception for all apilink errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`apilink.exit_codes`. The CLI entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ApilinkError):
    """Raised for invalid CLI arguments (malformed ``key=value`` pairs, bad JSON bodies)."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(ApilinkError):
    """Raised when the API rejects the credentials (HTTP 401 / 403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(ApilinkError):
    """Raised when the API returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(ApilinkError):
    """Raised when the API returns an error status other than 401/403/404."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(ApilinkError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ConfigError(ApilinkError):
    """Raised for configuration problems (missing profiles, unreadable or invalid config files)."""

    exit_code = EXIT_GENERIC_FAILURE


def classify_error(error: BaseException) -> ApilinkError:
    """Wrap an envelope error in the matching :class:`ApilinkError` subclass.

    ``httpx.HTTPStatusError`` is classified by status code, transport-level
    ``httpx`` errors become :class:`ConnectionError_`, and anything already
    an :class:`ApilinkError` is returned untouched.

    Args:
        error: The exception taken from ``ResponseEnvelope.error``.

    Returns:
        An :class:`ApilinkError` whose ``exit_code`` reflects the failure.
    """
    if isinstance(error, ApilinkError):
        return error

    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        message = f"HTTP {status}: {error.response.reason_phrase or ''}".rstrip(": ")
        if status in (401, 403):
            return AuthError(message)
        if status == 404:
            return NotFoundError(message)
        return ServerError(message)

    if isinstance(error, httpx.TransportError):
        return ConnectionError_(f"Connection failed: {error}")

    return ApilinkError(str(error) or error.__class__.__name__)


def error_exit_code(error: BaseException) -> int:
    """Return the process exit code for an envelope error."""
    return classify_error(error).exit_code
