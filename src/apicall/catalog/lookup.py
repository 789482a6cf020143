"""Query helpers over a parsed catalog.

Every function re-reads the catalog on each call, so a changed catalog
path or file is picked up immediately.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from apicall.catalog.loader import load_catalog
from apicall.config import resolve_catalog_path
from apicall.exceptions import NotFoundError
from apicall.models import ApiDefinition

PathLike = Optional[Union[str, Path]]


def get_apis(path: PathLike = None) -> list[ApiDefinition]:
    """Return every definition of the resolved catalog, in file order."""
    return load_catalog(resolve_catalog_path(path))


def get_api(service: str, name: str, path: PathLike = None) -> ApiDefinition:
    """Return the definition for ``service.name``.

    Raises:
        NotFoundError: If the catalog has no such ``(service, name)`` pair.
    """
    for definition in get_apis(path):
        if definition.service == service and definition.name == name:
            return definition
    raise NotFoundError(f"Unknown API: {service}.{name}")


def find_apis(pattern: Optional[str] = None, path: PathLike = None) -> list[ApiDefinition]:
    """Return definitions whose ``service.name`` contains *pattern*.

    Matching is a case-sensitive substring test.  An empty or ``None``
    pattern matches everything.
    """
    apis = get_apis(path)
    if not pattern:
        return apis
    return [api for api in apis if pattern in api.full_name]


def split_api_name(full_name: str) -> tuple[str, str]:
    """Split ``"service.name"`` on its first dot.

    Raises:
        NotFoundError: If *full_name* has no dot or an empty half.
    """
    service, sep, name = full_name.partition(".")
    if not sep or not service or not name:
        raise NotFoundError(f"Unknown API: {full_name}")
    return service, name
