"""Tests for AsyncAsanaClient."""

import asyncio
import os
from unittest.mock import patch

import httpx
import pytest
import respx

from asana_sdk.client import AsyncAsanaClient, AsyncScopedQuery
from asana_sdk.exceptions import (
    AsanaAPIError,
    AsanaConfigError,
    AsanaTransportError,
    AsanaValidationError,
)
from asana_sdk.models import Model

BASE_URL = "https://app.asana.com/api/1.0"


class User(Model, resource="users"):
    name: str


class Project(Model, resource="projects"):
    name: str


class Section(Model, resource="sections"):
    name: str


async def _call(method, *args, **kwargs):
    async with AsyncAsanaClient(token="token") as client:
        return await getattr(client, method)(*args, **kwargs)


class TestAsyncClientInit:
    """Tests for async client construction."""

    def test_requires_token(self):
        """Should reject an empty token."""
        with pytest.raises(AsanaConfigError):
            AsyncAsanaClient(token="")

    def test_from_env(self):
        """Should read the token from env."""
        env = {"ASANA_ACCESS_TOKEN": "env-token", "ASANA_DEBUG": "1"}
        with patch.dict(os.environ, env, clear=True):
            client = AsyncAsanaClient.from_env()
            assert client._token == "env-token"
            assert client._debug is True
            asyncio.run(client.aclose())

    def test_aclose_closes_owned_client(self):
        """Should close the httpx client it created."""
        client = AsyncAsanaClient(token="token")
        asyncio.run(client.aclose())
        assert client._http.is_closed is True

    def test_does_not_close_injected_client(self):
        """Should leave a caller-supplied httpx client open."""
        http = httpx.AsyncClient(base_url=BASE_URL)
        client = AsyncAsanaClient(token="token", http_client=http)
        asyncio.run(client.aclose())
        assert http.is_closed is False


class TestAsyncFetch:
    """Tests for async get/list/from_."""

    @respx.mock
    def test_get(self):
        """Should decode a single entity."""
        route = respx.get(f"{BASE_URL}/users/1").mock(
            return_value=httpx.Response(200, json={"data": {"name": "Alice"}})
        )

        user = asyncio.run(_call("get", User, "1"))

        assert user == User(name="Alice")
        assert route.calls.last.request.url.params["opt_fields"] == "resource_type,name"
        assert route.calls.last.request.headers["authorization"] == "Bearer token"

    @respx.mock
    def test_list_preserves_order(self):
        """Should return models in response order."""
        respx.get(f"{BASE_URL}/users").mock(
            return_value=httpx.Response(200, json={"data": [{"name": "A"}, {"name": "B"}]})
        )

        users = asyncio.run(_call("list", User))

        assert [u.name for u in users] == ["A", "B"]

    @respx.mock
    def test_scoped_list(self):
        """Should list children of the parent."""
        route = respx.get(f"{BASE_URL}/projects/123/sections").mock(
            return_value=httpx.Response(200, json={"data": [{"name": "Todo"}]})
        )

        async def run():
            async with AsyncAsanaClient(token="token") as client:
                scoped = client.from_(Project, "123")
                assert isinstance(scoped, AsyncScopedQuery)
                return await scoped.list(Section)

        sections = asyncio.run(run())

        assert sections == [Section(name="Todo")]
        assert route.calls.last.request.url.path == "/api/1.0/projects/123/sections"

    @respx.mock
    def test_scoped_get(self):
        """Should fetch one child of the parent."""
        respx.get(f"{BASE_URL}/projects/123/sections/456").mock(
            return_value=httpx.Response(200, json={"data": {"name": "Todo"}})
        )

        async def run():
            async with AsyncAsanaClient(token="token") as client:
                return await client.from_(Project, "123").get(Section, "456")

        assert asyncio.run(run()).name == "Todo"

    @respx.mock
    def test_concurrent_calls(self):
        """Should run independent calls concurrently."""
        respx.get(f"{BASE_URL}/users/1").mock(
            return_value=httpx.Response(200, json={"data": {"name": "Alice"}})
        )
        respx.get(f"{BASE_URL}/projects").mock(
            return_value=httpx.Response(200, json={"data": [{"name": "Launch"}]})
        )
        respx.get(f"{BASE_URL}/projects/1/sections").mock(
            return_value=httpx.Response(200, json={"data": []})
        )

        async def run():
            async with AsyncAsanaClient(token="token") as client:
                return await asyncio.gather(
                    client.get(User, "1"),
                    client.list(Project),
                    client.from_(Project, "1").list(Section),
                )

        user, projects, sections = asyncio.run(run())

        assert user.name == "Alice"
        assert projects[0].name == "Launch"
        assert sections == []


class TestAsyncErrors:
    """Tests for async error propagation."""

    @respx.mock
    def test_not_found(self):
        """Should raise AsanaAPIError on 404."""
        respx.get(f"{BASE_URL}/users/1").mock(return_value=httpx.Response(404))

        with pytest.raises(AsanaAPIError) as exc_info:
            asyncio.run(_call("get", User, "1"))

        assert exc_info.value.status_code == 404

    @respx.mock
    def test_network_error(self):
        """Should raise AsanaTransportError on connection failure."""
        respx.get(f"{BASE_URL}/users").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(AsanaTransportError):
            asyncio.run(_call("list", User))

    @respx.mock
    def test_decode_error(self):
        """Should raise AsanaValidationError on shape mismatch."""
        respx.get(f"{BASE_URL}/users").mock(
            return_value=httpx.Response(200, json={"data": [{"gid": "1"}]})
        )

        with pytest.raises(AsanaValidationError):
            asyncio.run(_call("list", User))

    @respx.mock
    def test_undecodable_body(self):
        """Should raise AsanaValidationError when the body cannot be decompressed."""
        respx.get(f"{BASE_URL}/users/1").mock(
            return_value=httpx.Response(
                200,
                headers={"Content-Encoding": "gzip"},
                stream=httpx.ByteStream(b"not gzip"),
            )
        )

        with pytest.raises(AsanaValidationError) as exc_info:
            asyncio.run(_call("get", User, "1"))

        assert isinstance(exc_info.value.__cause__, httpx.DecodingError)

    @respx.mock
    def test_too_many_redirects(self):
        """Should raise AsanaTransportError for other request errors."""
        respx.get(f"{BASE_URL}/users").mock(side_effect=httpx.TooManyRedirects("loop"))

        with pytest.raises(AsanaTransportError):
            asyncio.run(_call("list", User))


class TestAsyncInjectedClient:
    """Tests for a caller-supplied httpx.AsyncClient."""

    @respx.mock
    def test_sends_auth_header(self):
        """Should authenticate requests made through an injected client."""
        route = respx.get(f"{BASE_URL}/users/1").mock(
            return_value=httpx.Response(200, json={"data": {"name": "Alice"}})
        )

        async def run():
            async with httpx.AsyncClient(base_url=BASE_URL) as http:
                client = AsyncAsanaClient(token="secret-token", http_client=http)
                return await client.get(User, "1")

        assert asyncio.run(run()).name == "Alice"
        assert route.calls.last.request.headers["authorization"] == "Bearer secret-token"
