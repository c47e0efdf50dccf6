"""Clients for the Asana REST API.

Example:
    from asana_sdk import AsanaClient
    from asana_sdk.models import Model

    class User(Model, resource="users"):
        name: str
        email: str

    class Project(Model, resource="projects"):
        name: str

    class Section(Model, resource="sections"):
        name: str

    with AsanaClient(token="1/your:personal-access-token") as asana:
        me = asana.get(User, "me")
        users = asana.list(User, params={"workspace": "12345"})
        sections = asana.from_(Project, "12345678").list(Section)

AsyncAsanaClient exposes the same methods as coroutines.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from typing import Any

import httpx

from asana_sdk._internal.http import (
    DEFAULT_TIMEOUT,
    create_async_http_client,
    create_http_client,
    default_headers,
)
from asana_sdk._internal.request import (
    Scope,
    build_params,
    build_path,
    decode_many,
    decode_one,
)
from asana_sdk.exceptions import (
    AsanaConfigError,
    AsanaError,
    AsanaTransportError,
    AsanaValidationError,
)
from asana_sdk.models.base import Model, ModelT


class _BaseClient:
    """Configuration and debug output shared by the sync and async clients."""

    def __init__(
        self,
        token: str,
        *,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        debug: bool = False,
    ) -> None:
        if not token or not token.strip():
            raise AsanaConfigError("An Asana access token is required")
        self._token = token.strip()
        self._base_url = base_url
        self._timeout = timeout
        self._debug = debug
        # Sent per request so injected clients authenticate too
        self._headers = default_headers(self._token)

    @classmethod
    def from_env(cls, **kwargs: Any):
        """Create a client from environment variables.

        Required environment variables:
            ASANA_ACCESS_TOKEN: Personal access token.

        Optional environment variables:
            ASANA_BASE_URL: API base URL (default: https://app.asana.com/api/1.0).
            ASANA_TIMEOUT: Request timeout in seconds.
            ASANA_DEBUG: Set to "1" to enable debug output.

        Args:
            **kwargs: Extra constructor arguments, e.g. ``http_client``.

        Raises:
            AsanaConfigError: If ASANA_ACCESS_TOKEN is not set.
            ValueError: If ASANA_TIMEOUT is not a number.
        """
        token = os.environ.get("ASANA_ACCESS_TOKEN")
        if not token:
            raise AsanaConfigError("ASANA_ACCESS_TOKEN is not set")

        timeout = float(os.environ.get("ASANA_TIMEOUT", str(DEFAULT_TIMEOUT)))
        debug = os.environ.get("ASANA_DEBUG", "") == "1"

        return cls(
            token=token,
            base_url=os.environ.get("ASANA_BASE_URL") or None,
            timeout=timeout,
            debug=debug,
            **kwargs,
        )

    def _log_debug(self, message: str) -> None:
        """Log a debug message to stderr if debug mode is enabled."""
        if self._debug:
            print(f"[asana-sdk] {message}", file=sys.stderr)

    def _prepare(
        self,
        model_cls: type[Model],
        gid: str | None,
        scope: Scope | None,
        params: Mapping[str, Any] | None,
    ) -> tuple[str, dict[str, Any]]:
        path = build_path(model_cls, gid, scope)
        query = build_params(model_cls, params)
        self._log_debug(f"GET {path}?opt_fields={query['opt_fields']}")
        return path, query

    def _request_error(self, path: str, error: httpx.RequestError) -> AsanaError:
        self._log_debug(f"GET {path} failed: {error!r}")
        if isinstance(error, httpx.DecodingError):
            return AsanaValidationError(f"GET {path} returned an undecodable body: {error}")
        return AsanaTransportError(f"GET {path} failed: {error}")


# =============================================================================
# Sync client
# =============================================================================


class AsanaClient(_BaseClient):
    """Synchronous Asana client.

    Every call is a single GET request. Errors are raised, never swallowed:

        AsanaTransportError: no response was received (includes timeouts).
        AsanaValidationError: the body could not be decoded or does not match
            the requested model.
        AsanaAPIError: the API answered with a non-2xx status.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        debug: bool = False,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            token: Asana personal access token.
            base_url: API base URL.
            timeout: Request timeout in seconds.
            debug: Enable debug output to stderr.
            http_client: Pre-configured httpx client to use instead of
                creating one. Its own base URL and timeout apply; base_url
                and timeout are ignored. Auth headers are still sent.
                It is not closed by this client.
        """
        super().__init__(token, base_url=base_url, timeout=timeout, debug=debug)
        self._owns_http = http_client is None
        self._http = http_client or create_http_client(
            self._token, timeout=timeout, base_url=base_url
        )

    def get(
        self,
        model_cls: type[ModelT],
        gid: str,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> ModelT:
        """Fetch a single entity by gid.

        Args:
            model_cls: Model to request and decode into.
            gid: Entity gid (``"me"`` works for users).
            params: Extra query parameters.
        """
        return self._get(model_cls, gid, None, params)

    def list(
        self,
        model_cls: type[ModelT],
        *,
        params: Mapping[str, Any] | None = None,
    ) -> list[ModelT]:
        """Fetch one page of a collection, in the order the API returns it."""
        return self._list(model_cls, None, params)

    def from_(self, parent_cls: type[Model], parent_gid: str) -> ScopedQuery:
        """Scope the next call to children of a parent entity.

        Example:
            client.from_(Project, "12345").list(Section)
        """
        return ScopedQuery(self, (parent_cls, parent_gid))

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> AsanaClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _get(
        self,
        model_cls: type[ModelT],
        gid: str,
        scope: Scope | None,
        params: Mapping[str, Any] | None,
    ) -> ModelT:
        return decode_one(self._send(model_cls, gid, scope, params), model_cls)

    def _list(
        self,
        model_cls: type[ModelT],
        scope: Scope | None,
        params: Mapping[str, Any] | None,
    ) -> list[ModelT]:
        return decode_many(self._send(model_cls, None, scope, params), model_cls)

    def _send(
        self,
        model_cls: type[Model],
        gid: str | None,
        scope: Scope | None,
        params: Mapping[str, Any] | None,
    ) -> httpx.Response:
        path, query = self._prepare(model_cls, gid, scope, params)
        try:
            response = self._http.get(path, params=query, headers=self._headers)
        except httpx.RequestError as e:
            raise self._request_error(path, e) from e
        self._log_debug(f"GET {path} -> {response.status_code}")
        return response


class ScopedQuery:
    """Fetches restricted to children of one parent entity."""

    def __init__(self, client: AsanaClient, scope: Scope) -> None:
        self._client = client
        self._scope = scope

    @property
    def scope(self) -> Scope:
        return self._scope

    def get(
        self,
        model_cls: type[ModelT],
        gid: str,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> ModelT:
        return self._client._get(model_cls, gid, self._scope, params)

    def list(
        self,
        model_cls: type[ModelT],
        *,
        params: Mapping[str, Any] | None = None,
    ) -> list[ModelT]:
        return self._client._list(model_cls, self._scope, params)


# =============================================================================
# Async client
# =============================================================================


class AsyncAsanaClient(_BaseClient):
    """Asynchronous Asana client.

    Same surface as AsanaClient with coroutine methods. Calls share no state,
    so they can be gathered concurrently.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        debug: bool = False,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(token, base_url=base_url, timeout=timeout, debug=debug)
        self._owns_http = http_client is None
        self._http = http_client or create_async_http_client(
            self._token, timeout=timeout, base_url=base_url
        )

    async def get(
        self,
        model_cls: type[ModelT],
        gid: str,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> ModelT:
        return await self._get(model_cls, gid, None, params)

    async def list(
        self,
        model_cls: type[ModelT],
        *,
        params: Mapping[str, Any] | None = None,
    ) -> list[ModelT]:
        return await self._list(model_cls, None, params)

    def from_(self, parent_cls: type[Model], parent_gid: str) -> AsyncScopedQuery:
        return AsyncScopedQuery(self, (parent_cls, parent_gid))

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> AsyncAsanaClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _get(
        self,
        model_cls: type[ModelT],
        gid: str,
        scope: Scope | None,
        params: Mapping[str, Any] | None,
    ) -> ModelT:
        return decode_one(await self._send(model_cls, gid, scope, params), model_cls)

    async def _list(
        self,
        model_cls: type[ModelT],
        scope: Scope | None,
        params: Mapping[str, Any] | None,
    ) -> list[ModelT]:
        return decode_many(await self._send(model_cls, None, scope, params), model_cls)

    async def _send(
        self,
        model_cls: type[Model],
        gid: str | None,
        scope: Scope | None,
        params: Mapping[str, Any] | None,
    ) -> httpx.Response:
        path, query = self._prepare(model_cls, gid, scope, params)
        try:
            response = await self._http.get(path, params=query, headers=self._headers)
        except httpx.RequestError as e:
            raise self._request_error(path, e) from e
        self._log_debug(f"GET {path} -> {response.status_code}")
        return response


class AsyncScopedQuery:
    """Async counterpart of ScopedQuery."""

    def __init__(self, client: AsyncAsanaClient, scope: Scope) -> None:
        self._client = client
        self._scope = scope

    @property
    def scope(self) -> Scope:
        return self._scope

    async def get(
        self,
        model_cls: type[ModelT],
        gid: str,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> ModelT:
        return await self._client._get(model_cls, gid, self._scope, params)

    async def list(
        self,
        model_cls: type[ModelT],
        *,
        params: Mapping[str, Any] | None = None,
    ) -> list[ModelT]:
        return await self._client._list(model_cls, self._scope, params)
