"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~apicall.exceptions.ApicallError` subclass.
Shell wrappers can inspect the exit code to tell a missing variable apart
from a network failure without parsing stderr.

Example::

    $ apicall openai.chat MODEL=gpt-4o
    Error: Variable PROMPT is required
    $ echo $?
    2   # EXIT_INVALID_USAGE -- a required variable was not supplied
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred, or the requested API is not in the catalog."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments, or a required template variable could not be resolved."""

EXIT_HTTP_ERROR = 5
"""The remote API answered with an HTTP 4xx or 5xx status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_CATALOG_ERROR = 7
"""The API catalog could not be read or contains a malformed record."""
