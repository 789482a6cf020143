"""Assemble a :class:`~apicall.models.ResolvedRequest` from a catalog definition.

Templates are resolved in a fixed order -- URL, then header values in
definition order, then body -- so the first missing required variable
reported is always the same for the same inputs.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from apicall.catalog.lookup import get_api
from apicall.models import ApiDefinition, ResolvedRequest
from apicall.templating.resolver import VariableResolver


def build_request(
    definition: ApiDefinition,
    supplied: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ResolvedRequest:
    """Resolve every template of *definition*.

    Args:
        definition: The catalog entry to resolve.
        supplied: Explicit variable values.
        environ: Environment mapping; defaults to :data:`os.environ`.

    Returns:
        A new :class:`~apicall.models.ResolvedRequest`.

    Raises:
        MissingRequiredVariableError: For the first required placeholder
            (URL, headers, body order) that no source can satisfy.
    """
    resolver = VariableResolver(supplied, environ)
    url = resolver.resolve(definition.url)
    headers = {key: resolver.resolve(value) for key, value in definition.headers.items()}
    body = resolver.resolve(definition.body)
    return ResolvedRequest(url=url, method=definition.method, headers=headers, body=body)


def get_request(
    service: str,
    name: str,
    variables: Optional[Mapping[str, Any]] = None,
    path: Optional[Union[str, Path]] = None,
) -> ResolvedRequest:
    """Look up ``service.name`` and resolve it against *variables* and the environment.

    Raises:
        NotFoundError: If the API is not in the catalog.
        MissingRequiredVariableError: If a required variable is missing.
    """
    return build_request(get_api(service, name, path), variables)
