"""Utilities for creating standardized httpx AsyncClient instances."""

from typing import Any, Protocol

import httpx

__all__ = ["create_http_client", "HttpClientFactory"]


class HttpClientFactory(Protocol):
    def __call__(
        self,
        headers: dict[str, str] | None = None,
        timeout: httpx.Timeout | None = None,
    ) -> httpx.AsyncClient: ...


def create_http_client(
    headers: dict[str, str] | None = None,
    timeout: httpx.Timeout | None = None,
) -> httpx.AsyncClient:
    """Create a standardized httpx AsyncClient.

    The per-call deadline is enforced by the executor's cancel scope, so the
    httpx timeout here only bounds individual socket operations.

    Args:
        headers: Optional headers to include with all requests.
        timeout: Request timeout as httpx.Timeout object.
            Defaults to 30 seconds if not specified.

    Returns:
        Configured httpx.AsyncClient instance with redirects enabled.
    """
    kwargs: dict[str, Any] = {"follow_redirects": True}

    if timeout is None:
        kwargs["timeout"] = httpx.Timeout(30.0)
    else:
        kwargs["timeout"] = timeout

    if headers is not None:
        kwargs["headers"] = headers

    return httpx.AsyncClient(**kwargs)
