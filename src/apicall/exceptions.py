"""Exception hierarchy for apicall.

All exceptions inherit from :class:`ApicallError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`apicall.exit_codes`.
The command handlers in :mod:`apicall.app` catch ``ApicallError``, print the
message to stderr and exit with the matching code.

Subclass hierarchy::

    ApicallError (exit 1)
    +-- InvalidUsageError              (exit 2)
    |   +-- MissingRequiredVariableError (exit 2)
    +-- NotFoundError                  (exit 1)
    +-- ConnectionError_               (exit 6)
    +-- CatalogError                   (exit 7)
    |   +-- MalformedRecordError       (exit 7)
    +-- ConfigError                    (exit 1)
"""

from __future__ import annotations

from apicall.exit_codes import (
    EXIT_CATALOG_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class ApicallError(Exception):
    """Base exception for all apicall errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ApicallError):
    """Raised for invalid CLI arguments (e.g. a variable without ``=``)."""

    exit_code = EXIT_INVALID_USAGE


class MissingRequiredVariableError(InvalidUsageError):
    """Raised when a required ``!$NAME`` placeholder has no resolvable value.

    The offending variable name is available as :attr:`name`.
    """

    def __init__(self, name: str):
        super().__init__(f"Variable {name} is required")
        self.name = name


class NotFoundError(ApicallError):
    """Raised when no ``(service, name)`` pair in the catalog matches."""

    exit_code = EXIT_GENERIC_FAILURE


class ConnectionError_(ApicallError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class CatalogError(ApicallError):
    """Raised when the catalog file cannot be located or read."""

    exit_code = EXIT_CATALOG_ERROR


class MalformedRecordError(CatalogError):
    """Raised when a catalog line cannot be split into a valid record.

    Args:
        message: What is wrong with the record.
        line: 1-based line number of the offending line, if known.
        path: Catalog file the line came from, if known.
    """

    def __init__(self, message: str, line: int | None = None, path: str | None = None):
        location = path or "<catalog>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"Malformed record at {location}: {message}")
        self.line = line
        self.path = path


class ConfigError(ApicallError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
