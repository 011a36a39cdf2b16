"""
Unit tests for the author service client.
"""

import asyncio
from uuid import uuid4

import httpx
import pytest

from catalog.author_client import AuthorServiceClient

BASE_URL = "http://authors.test"


def make_client(handler):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AuthorServiceClient(BASE_URL, http_client)


def author_payload(author_id):
    return {
        "id": str(author_id),
        "firstName": "Matt",
        "lastName": "Butcher",
        "address": "Boulder, CO",
        "language": "English",
    }


class TestAuthorServiceClient:
    """Test cases for AuthorServiceClient."""

    def test_author_url(self):
        author_id = uuid4()
        client = AuthorServiceClient(BASE_URL + "/", httpx.AsyncClient())

        assert client.author_url(author_id) == f"{BASE_URL}/api/v1/authors/{author_id}"

    @pytest.mark.asyncio
    async def test_resolve_success(self):
        author_id = uuid4()
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=author_payload(author_id))

        client = make_client(handler)
        author = await client.resolve(author_id)
        await client.aclose()

        assert author is not None
        assert author.id == author_id
        assert author.first_name == "Matt"
        assert requests[0].method == "GET"
        assert str(requests[0].url) == f"{BASE_URL}/api/v1/authors/{author_id}"

    @pytest.mark.asyncio
    async def test_resolve_tolerates_null_fields(self):
        author_id = uuid4()
        payload = author_payload(author_id)
        payload.update(address=None, language=None, lastName=None)

        client = make_client(lambda request: httpx.Response(200, json=payload))
        author = await client.resolve(author_id)

        assert author is not None
        assert author.id == author_id
        assert author.first_name == "Matt"
        assert author.address is None
        assert author.language is None

    @pytest.mark.asyncio
    async def test_resolve_not_found_status(self):
        client = make_client(lambda request: httpx.Response(404, json={"error": "missing"}))

        assert await client.resolve(uuid4()) is None

    @pytest.mark.asyncio
    async def test_resolve_server_error(self):
        client = make_client(lambda request: httpx.Response(500))

        assert await client.resolve(uuid4()) is None

    @pytest.mark.asyncio
    async def test_resolve_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        assert await client.resolve(uuid4()) is None

    @pytest.mark.asyncio
    async def test_resolve_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)

        assert await client.resolve(uuid4()) is None

    @pytest.mark.asyncio
    async def test_resolve_bounds_whole_lookup(self):
        async def handler(request):
            await asyncio.sleep(1)
            return httpx.Response(200, json=author_payload(uuid4()))

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = AuthorServiceClient(BASE_URL, http_client, timeout=0.05)

        assert await client.resolve(uuid4()) is None

    @pytest.mark.asyncio
    async def test_resolve_invalid_json(self):
        client = make_client(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

        assert await client.resolve(uuid4()) is None

    @pytest.mark.asyncio
    async def test_resolve_wrong_shape(self):
        client = make_client(lambda request: httpx.Response(200, json={"id": "not-a-uuid"}))

        assert await client.resolve(uuid4()) is None

    def test_from_config(self, bff_config):
        client = AuthorServiceClient.from_config(bff_config)

        assert client.base_url == "http://authors.test"
        assert client.http_client.timeout.read == bff_config.author_service_timeout
        assert client.timeout == bff_config.author_service_timeout
