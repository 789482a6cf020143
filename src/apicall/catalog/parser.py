"""Parse the tabular catalog format into :class:`~apicall.models.ApiDefinition` objects.

A catalog is plain text.  The first meaningful line names the columns; every
following non-blank line is one API::

    service name url method headers body
    httpbin get https://httpbin.org/get GET {}
    openai chat https://api.openai.com/v1/chat/completions POST {"Authorization":"Bearer !$API_KEY"} {"model":"$MODEL","messages":[{"role":"user","content":"!$PROMPT"}]}

Fields are separated by runs of spaces or tabs.  A field starting with ``{``
or ``[`` runs to its matching closing bracket, so JSON payloads may contain
spaces inside quoted strings.  The ``body`` column is whatever remains of the
line after ``headers`` and may be omitted.  Lines starting with ``#`` are
comments.

The ``headers`` column is ``{}`` for no headers, a JSON object, or the compact
form ``{Key:Value,Other-Key:Value}``.

The single entry point is :func:`parse_catalog`; it performs no I/O.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from apicall.exceptions import MalformedRecordError
from apicall.models import ApiDefinition, HTTPMethod

logger = logging.getLogger(__name__)

COLUMNS = ("service", "name", "url", "method", "headers", "body")
_REQUIRED_FIELDS = len(COLUMNS) - 1
_EMPTY_BODY_MARKERS = frozenset({"-", '""'})
_CLOSING = {"{": "}", "[": "]"}


def parse_catalog(source: str, path: Optional[str] = None) -> list[ApiDefinition]:
    """Parse catalog text into API definitions, preserving file order.

    Args:
        source: Full catalog text, header line included.
        path: Where *source* came from; only used in error messages.

    Returns:
        One :class:`~apicall.models.ApiDefinition` per data line.

    Raises:
        MalformedRecordError: If the header line is wrong, a data line has
            too few fields, an unknown method, an undecodable headers field,
            an unterminated bracket or quote, or repeats a ``(service, name)``
            pair already defined.
    """
    definitions: list[ApiDefinition] = []
    seen: set[tuple[str, str]] = set()
    header_found = False

    for lineno, raw_line in enumerate(source.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        if not header_found:
            _check_header(line, lineno, path)
            header_found = True
            continue

        definition = _parse_record(line, lineno, path)
        key = (definition.service, definition.name)
        if key in seen:
            raise MalformedRecordError(
                f"duplicate API '{definition.full_name}'", line=lineno, path=path
            )
        seen.add(key)
        definitions.append(definition)

    logger.debug("Parsed %d API definitions from %s", len(definitions), path or "<catalog>")
    return definitions


def _check_header(line: str, lineno: int, path: Optional[str]) -> None:
    columns = tuple(col.lower() for col in line.split())
    if columns != COLUMNS:
        raise MalformedRecordError(
            f"expected header '{' '.join(COLUMNS)}', got '{line}'",
            line=lineno,
            path=path,
        )


def _parse_record(line: str, lineno: int, path: Optional[str]) -> ApiDefinition:
    fields = split_fields(line, lineno, path)
    if len(fields) < _REQUIRED_FIELDS:
        raise MalformedRecordError(
            f"expected {len(COLUMNS)} fields ({' '.join(COLUMNS)}), got {len(fields)}",
            line=lineno,
            path=path,
        )

    service, name, url, method, headers = fields[:_REQUIRED_FIELDS]
    body = fields[_REQUIRED_FIELDS] if len(fields) > _REQUIRED_FIELDS else ""
    if body in _EMPTY_BODY_MARKERS:
        body = ""

    try:
        http_method = HTTPMethod(method.upper())
    except ValueError:
        raise MalformedRecordError(
            f"unknown HTTP method '{method}'", line=lineno, path=path
        ) from None

    return ApiDefinition(
        service=service,
        name=name,
        url=url,
        method=http_method,
        headers=parse_headers(headers, lineno, path),
        body=body,
    )


def split_fields(line: str, lineno: int = 0, path: Optional[str] = None) -> list[str]:
    """Split a data line into at most six fields.

    The first five fields are whitespace delimited, except that a field
    opening with ``{`` or ``[`` extends to the matching bracket.  Whatever
    follows the fifth field, stripped, becomes the sixth (``body``) field.
    """
    fields: list[str] = []
    i = 0
    length = len(line)

    while len(fields) < _REQUIRED_FIELDS:
        while i < length and line[i].isspace():
            i += 1
        if i >= length:
            return fields
        end = i
        if line[i] in _CLOSING:
            end = _match_bracket(line, i, lineno, path)
        while end < length and not line[end].isspace():
            end += 1
        fields.append(line[i:end])
        i = end

    rest = line[i:].strip()
    if rest:
        fields.append(rest)
    return fields


def _match_bracket(line: str, start: int, lineno: int, path: Optional[str]) -> int:
    """Return the index just past the bracket that closes ``line[start]``."""
    stack = [_CLOSING[line[start]]]
    in_string = False
    i = start + 1

    while i < len(line):
        ch = line[i]
        if in_string:
            if ch == "\\":
                i += 1
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch in _CLOSING:
            stack.append(_CLOSING[ch])
        elif ch == stack[-1]:
            stack.pop()
            if not stack:
                return i + 1
        i += 1

    what = "string" if in_string else f"'{line[start]}'"
    raise MalformedRecordError(f"unterminated {what}", line=lineno, path=path)


def parse_headers(field: str, lineno: int = 0, path: Optional[str] = None) -> dict[str, str]:
    """Decode the ``headers`` column into an ordered header mapping.

    Accepts ``{}``, a JSON object, or the compact ``{Key:Value,...}`` form.
    Header values stay templates; only their names are fixed here.
    """
    text = field.strip()
    if text in ("", "{}", "-"):
        return {}
    if not (text.startswith("{") and text.endswith("}")):
        raise MalformedRecordError(
            f"headers must be enclosed in braces, got '{field}'", line=lineno, path=path
        )

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = _parse_compact_headers(text[1:-1], lineno, path)

    if not isinstance(data, dict):
        raise MalformedRecordError(
            f"headers must be a mapping, got '{field}'", line=lineno, path=path
        )

    headers: dict[str, str] = {}
    for key, value in data.items():
        headers[str(key)] = value if isinstance(value, str) else json.dumps(value)
    return headers


def _parse_compact_headers(inner: str, lineno: int, path: Optional[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for pair in _split_top_level(inner, ","):
        if not pair.strip():
            continue
        key, sep, value = pair.partition(":")
        key = _unquote(key.strip())
        if not sep or not key:
            raise MalformedRecordError(
                f"header entry '{pair.strip()}' is not 'Name:Value'", line=lineno, path=path
            )
        headers[key] = _unquote(value.strip())
    return headers


def _split_top_level(text: str, sep: str) -> list[str]:
    parts: list[str] = []
    current: list[str] = []
    quote: Optional[str] = None
    for ch in text:
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'" and _at_item_start(current):
            quote = ch
        elif ch == sep:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return parts


def _at_item_start(current: list[str]) -> bool:
    """True when only whitespace precedes the cursor in the current key or value."""
    prefix = "".join(current).rstrip()
    return not prefix or prefix.endswith(":")


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text
