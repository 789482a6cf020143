"""Response helpers -- turn an :class:`httpx.Response` into printable data.

See Also:
    :mod:`apicall.output` -- the output manager that renders data.
"""

from __future__ import annotations

import json
from typing import Any

import httpx


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first.  If that fails (e.g. the
    response is HTML or plain text), returns the raw text.  Returns
    ``None`` for responses with no content.

    Args:
        response: The :class:`httpx.Response` to extract data from.

    Returns:
        A JSON-decoded object (``dict``, ``list``, etc.), a ``str`` of raw
        text, or ``None`` if the body is empty.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text
