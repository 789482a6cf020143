"""Canonical Pydantic models shared across all apicall modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig` and :class:`GlobalConfig`.

**Catalog models** -- produced by the catalog parser:
    :class:`HTTPMethod` and :class:`ApiDefinition`.

**Templating models** -- produced by the placeholder scanner and the request
assembler:
    :class:`TextSegment`, :class:`Placeholder` and :class:`ResolvedRequest`.

Catalog and templating models are frozen: a parsed catalog is never mutated,
and a resolved request belongs to the caller unchanged.
"""

from __future__ import annotations

import enum
import json
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class RequestConfig(BaseModel):
    """HTTP settings used by :class:`~apicall.client.ApiClient`."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")


class GlobalConfig(BaseModel):
    """Global apicall configuration stored in ``<config_dir>/config.json``.

    Example::

        {
          "catalog": "~/work/apis.txt",
          "request": {"timeout": 10}
        }
    """

    catalog: Optional[str] = Field(
        default=None, description="Path to the catalog file used when none is given"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)


# --- Catalog ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods accepted in the ``method`` column of a catalog."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class ApiDefinition(BaseModel):
    """One row of the catalog.

    ``url``, the values of ``headers`` and ``body`` are templates that may
    contain ``$NAME`` (optional) and ``!$NAME`` (required) placeholders.
    Header names are never templated.
    """

    model_config = ConfigDict(frozen=True)

    service: str
    name: str
    url: str
    method: HTTPMethod = HTTPMethod.GET
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""

    @property
    def full_name(self) -> str:
        """Dotted ``service.name`` identifier used by the CLI."""
        return f"{self.service}.{self.name}"


# --- Templating ---


class TextSegment(BaseModel):
    """Literal template text between placeholders."""

    model_config = ConfigDict(frozen=True)

    text: str


class Placeholder(BaseModel):
    """A ``$NAME`` or ``!$NAME`` reference inside a template.

    ``marker`` is the exact text found in the template (including the ``!``
    for required placeholders) so callers can report it verbatim.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    required: bool = False
    marker: str


Token = Union[TextSegment, Placeholder]


class ResolvedRequest(BaseModel):
    """A fully substituted, executable HTTP request descriptor."""

    model_config = ConfigDict(frozen=True)

    url: str
    method: HTTPMethod
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""

    def json_body(self) -> Any:
        """Return the body parsed as JSON, or ``None`` if empty or not JSON."""
        if not self.body:
            return None
        try:
            return json.loads(self.body)
        except json.JSONDecodeError:
            return None
