"""apicall -- call HTTP APIs from a declarative, templated catalog.

A catalog is a whitespace-separated table of API definitions::

    service name url method headers body
    openai chat https://api.openai.com/v1/chat/completions POST {"Authorization":"Bearer !$API_KEY"} {"model":"$MODEL","messages":[{"role":"user","content":"!$PROMPT"}]}

``$NAME`` placeholders are optional (empty when unresolved); ``!$NAME``
placeholders are required.  Values come from explicit variables, then the
environment, with ``OPENAI_API_KEY`` and ``OPENROUTER_API_KEY`` accepted for
``API_KEY``.

Typical usage::

    from apicall import get_request, fetch_api

    request = get_request("openai", "chat", {"MODEL": "gpt-4o", "PROMPT": "hi"})
    data = fetch_api("httpbin", "get", simple=True)

Modules:
    app: Typer application and CLI entry point.
    catalog: Catalog parsing and lookup.
    templating: Placeholder scanning and variable resolution.
    request: Request assembly from a definition.
    client: httpx-based executor.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and catalog discovery.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting with Rich support.
"""

__version__ = "0.1.0"

from apicall.catalog import find_apis, get_api, get_apis, parse_catalog  # noqa: E402
from apicall.client import fetch_api  # noqa: E402
from apicall.request import build_request, get_request  # noqa: E402

__all__ = [
    "build_request",
    "fetch_api",
    "find_apis",
    "get_api",
    "get_apis",
    "get_request",
    "parse_catalog",
]
