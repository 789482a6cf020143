"""API catalog -- parse the tabular catalog format and look definitions up.

Typical usage::

    from apicall.catalog import get_api, find_apis

    chat = get_api("openai", "chat")
    for api in find_apis("httpbin"):
        print(api.full_name)

Sub-modules:

* :mod:`~apicall.catalog.parser` -- pure text -> definitions parser.
* :mod:`~apicall.catalog.loader` -- reads a catalog file from disk.
* :mod:`~apicall.catalog.lookup` -- ``get_apis``/``get_api``/``find_apis``
  against the catalog chosen by :func:`~apicall.config.resolve_catalog_path`.
"""

from apicall.catalog.loader import load_catalog
from apicall.catalog.lookup import find_apis, get_api, get_apis, split_api_name
from apicall.catalog.parser import parse_catalog

__all__ = [
    "find_apis",
    "get_api",
    "get_apis",
    "load_catalog",
    "parse_catalog",
    "split_api_name",
]
