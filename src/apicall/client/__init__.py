"""HTTP execution for resolved catalog requests.

Example::

    from apicall.client import fetch_api

    data = fetch_api("httpbin", "get", simple=True)
"""

from apicall.client.executor import ApiClient, fetch_api
from apicall.client.response import extract_response_data

__all__ = ["ApiClient", "extract_response_data", "fetch_api"]
