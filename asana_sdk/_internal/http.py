"""Shared HTTP client configuration."""

import httpx

from asana_sdk._version import __version__

DEFAULT_BASE_URL = "https://app.asana.com/api/1.0"
DEFAULT_TIMEOUT = 30.0


def default_headers(token: str) -> dict[str, str]:
    """Headers sent with every Asana request."""
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/json",
        "User-Agent": f"asana-sdk/{__version__}",
    }


def create_http_client(
    token: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    base_url: str | None = None,
) -> httpx.Client:
    """Create configured HTTP client.

    Args:
        token: Personal access token sent as a bearer token.
        timeout: Request timeout in seconds.
        base_url: Optional base URL for all requests.

    Returns:
        Configured httpx.Client instance.
    """
    return httpx.Client(
        timeout=timeout,
        base_url=base_url or DEFAULT_BASE_URL,
        headers=default_headers(token),
    )


def create_async_http_client(
    token: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    base_url: str | None = None,
) -> httpx.AsyncClient:
    """Async counterpart of create_http_client."""
    return httpx.AsyncClient(
        timeout=timeout,
        base_url=base_url or DEFAULT_BASE_URL,
        headers=default_headers(token),
    )
