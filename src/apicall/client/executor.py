"""Send a :class:`~apicall.models.ResolvedRequest` over HTTP.

This module provides :class:`ApiClient`, a thin wrapper around
:class:`httpx.Client`, and :func:`fetch_api`, which resolves a catalog entry
and sends it in one call.

- **Error mapping** -- transport failures (timeouts, DNS, refused
  connections) become :class:`~apicall.exceptions.ConnectionError_`.  HTTP
  error statuses are *not* raised; the response is returned as-is so callers
  can show the body the API sent back.
- **Dry-run mode** -- prints the request to stderr and returns a synthetic
  200 response without sending traffic.

No retry and no caching: one call, one request.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

import httpx

from apicall.client.response import extract_response_data
from apicall.config import resolve_request_config
from apicall.exceptions import ConnectionError_
from apicall.models import RequestConfig, ResolvedRequest
from apicall.output import get_output
from apicall.request import get_request

logger = logging.getLogger(__name__)


class ApiClient:
    """Synchronous HTTP client for resolved catalog requests.

    Must be used as a context manager so that the underlying transport is
    opened and closed properly.

    Args:
        config: Timeout and TLS settings.  Defaults to
            :func:`~apicall.config.resolve_request_config`.
        dry_run: When ``True``, requests are printed to stderr and a
            synthetic 200 response is returned without network I/O.
        transport: Optional httpx transport, mainly for tests
            (:class:`httpx.MockTransport`).

    Example::

        with ApiClient() as client:
            response = client.send(get_request("httpbin", "get"))
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        dry_run: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._dry_run = dry_run
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> ApiClient:
        config = self._config or resolve_request_config()
        self._client = httpx.Client(
            timeout=config.timeout,
            verify=config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public
    # ------------------------------------------------------------------ #

    def send(self, request: ResolvedRequest) -> httpx.Response:
        """Send *request* and return the raw response.

        Args:
            request: A fully resolved request.

        Returns:
            The :class:`httpx.Response`, whatever its status code.

        Raises:
            ConnectionError_: On network or timeout errors.
        """
        if self._dry_run:
            return self._print_dry_run(request)

        assert self._client is not None, "Client not initialised -- use as context manager"

        method = request.method.value
        logger.debug("%s %s", method, request.url)
        try:
            response = self._client.request(
                method,
                request.url,
                headers=request.headers,
                content=request.body.encode("utf-8") if request.body else None,
            )
        except httpx.TimeoutException as exc:
            raise ConnectionError_(f"Request to {request.url} timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Connection to {request.url} failed: {exc}") from exc
        except httpx.InvalidURL as exc:
            raise ConnectionError_(f"Invalid URL '{request.url}': {exc}") from exc

        logger.debug("HTTP %s from %s", response.status_code, request.url)
        return response

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _print_dry_run(self, request: ResolvedRequest) -> httpx.Response:
        """Print request details to stderr and return a synthetic 200 response."""
        output = get_output()
        output.info(f"[dry-run] {request.method.value} {request.url}")

        for key, value in request.headers.items():
            output.info(f"  Header: {key}: {value}")

        if request.body:
            output.info(f"  Body: {request.body}")

        return httpx.Response(
            status_code=200,
            headers={"content-type": "application/json"},
            json={"dry_run": True, "message": "Request was not sent"},
            request=httpx.Request(method=request.method.value, url=request.url),
        )


def fetch_api(
    service: str,
    name: str,
    *,
    config_path: Optional[Union[str, Path]] = None,
    simple: bool = False,
    variables: Optional[Mapping[str, Any]] = None,
    dry_run: bool = False,
    timeout: Optional[float] = None,
    client: Optional[ApiClient] = None,
) -> Any:
    """Resolve ``service.name`` from the catalog and send it.

    Args:
        service: Catalog service name.
        name: API name within *service*.
        config_path: Catalog to use instead of the discovered one.
        simple: Return the decoded body (JSON, text or ``None``) instead of
            the full :class:`httpx.Response`.
        variables: Explicit template variables.
        dry_run: Print the request instead of sending it.
        timeout: Request timeout in seconds, overriding the configured one.
            Ignored when *client* is given.
        client: An already-entered :class:`ApiClient` to reuse.

    Returns:
        The :class:`httpx.Response`, or its decoded body when *simple*.

    Raises:
        NotFoundError: If the API is not in the catalog.
        MissingRequiredVariableError: If a required variable is missing.
        ConnectionError_: On network failures.
    """
    request = get_request(service, name, variables, config_path)

    if client is not None:
        response = client.send(request)
    else:
        config = resolve_request_config()
        if timeout is not None:
            config = config.model_copy(update={"timeout": timeout})
        with ApiClient(config=config, dry_run=dry_run) as own_client:
            response = own_client.send(request)

    if simple:
        return extract_response_data(response)
    return response
