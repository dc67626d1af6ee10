"""Exception hierarchy for swbrowse.

All exceptions inherit from :class:`SwbrowseError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`swbrowse.exit_codes`.
The top-level error handler in :func:`swbrowse.app.main` catches
``SwbrowseError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SwbrowseError (exit 1)
    +-- InvalidUsageError         (exit 2)
    +-- ConfigError               (exit 1)
    +-- CacheCorruption           (exit 1, recovered inside the cache)
    +-- FetchError                (exit 5)
        +-- NotFoundError         (exit 4)
        +-- ServerError           (exit 5)
        +-- InvalidResponseError  (exit 5)
        +-- ConnectionError_      (exit 6)
"""

from swbrowse.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class SwbrowseError(Exception):
    """Base exception for all swbrowse errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`swbrowse.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SwbrowseError):
    """Raised for invalid CLI arguments (unknown category, page below 1)."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(SwbrowseError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE


class CacheCorruption(SwbrowseError):
    """Raised when a stored cache entry cannot be decoded.

    Never escapes :class:`~swbrowse.cache.ExpiringFetchCache`: the cache
    treats a corrupt entry as a miss and overwrites it on the next
    successful fetch.

    Args:
        key: The cache key whose stored value is unreadable.
        reason: Short description of what was wrong with the value.
    """

    def __init__(self, key: str, reason: str):
        super().__init__(f"Corrupt cache entry for {key}: {reason}")
        self.key = key
        self.reason = reason


class FetchError(SwbrowseError):
    """Raised when the transport call for a resource fails.

    Carries the requested ``url`` so that callers can report which
    resource could not be loaded.
    """

    exit_code = EXIT_SERVER_ERROR

    def __init__(self, message: str, url: str | None = None, exit_code: int | None = None):
        super().__init__(message, exit_code)
        self.url = url


class NotFoundError(FetchError):
    """Raised when the API returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(FetchError):
    """Raised when the API returns an HTTP error status other than 404."""

    exit_code = EXIT_SERVER_ERROR


class InvalidResponseError(FetchError):
    """Raised when a successful response body is not valid JSON."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(FetchError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR
