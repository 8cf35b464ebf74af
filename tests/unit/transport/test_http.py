"""Tests for the httpx transport."""

import json

import httpx
import pytest

from pirsch_client.errors.exceptions import AuthenticationError, TransportError
from pirsch_client.transport import HttpxTransport, Transport


def _transport(handler) -> HttpxTransport:
    return HttpxTransport(base_url="https://api.pirsch.io", transport=httpx.MockTransport(handler))


class TestHttpxTransport:
    """Test HttpxTransport request handling."""

    @pytest.mark.unit
    def test_implements_transport_protocol(self):
        assert isinstance(_transport(lambda request: httpx.Response(200)), Transport)

    @pytest.mark.unit
    def test_timeout_is_converted_to_seconds(self):
        transport = HttpxTransport(timeout=2500)

        assert transport.timeout == 2500
        assert transport._client.timeout.read == 2.5

    @pytest.mark.unit
    async def test_get_sends_headers_and_params(self):
        """GET should send headers and query parameters and decode JSON."""
        seen: list[httpx.Request] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"visitors": 3}])

        async with _transport(handler) as transport:
            result = await transport.get(
                "/api/v1/statistics/visitor",
                headers={"Authorization": "Bearer token"},
                params={"id": "domain", "from": "2024-01-01"},
            )

        assert result == [{"visitors": 3}]
        assert seen[0].url.path == "/api/v1/statistics/visitor"
        assert seen[0].url.params["id"] == "domain"
        assert seen[0].url.params["from"] == "2024-01-01"
        assert seen[0].headers["Authorization"] == "Bearer token"

    @pytest.mark.unit
    async def test_post_sends_json_body(self):
        seen: list[httpx.Request] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        async with _transport(handler) as transport:
            result = await transport.post("/api/v1/hit", {"url": "https://example.com"})

        assert result is None
        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {"url": "https://example.com"}

    @pytest.mark.unit
    async def test_non_json_success_body_decodes_to_none(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="ok")

        async with _transport(handler) as transport:
            assert await transport.post("/api/v1/hit", {}) is None

    @pytest.mark.unit
    async def test_401_raises_authentication_error(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": ["unauthorized"]})

        async with _transport(handler) as transport:
            with pytest.raises(AuthenticationError) as exc_info:
                await transport.get("/api/v1/domain")

        assert exc_info.value.messages == ["unauthorized"]

    @pytest.mark.unit
    async def test_400_raises_transport_error_with_validation(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": ["invalid"], "validation": {"ip": "required"}})

        async with _transport(handler) as transport:
            with pytest.raises(TransportError) as exc_info:
                await transport.post("/api/v1/hit", {})

        assert exc_info.value.code == 400
        assert exc_info.value.validation == {"ip": "required"}

    @pytest.mark.unit
    async def test_timeout_is_normalized(self):
        """Timeouts propagate as httpx errors and normalize to TransportError."""

        async def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with _transport(handler) as transport:
            with pytest.raises(httpx.ReadTimeout) as exc_info:
                await transport.get("/api/v1/domain")

            normalized = transport.normalize_error(exc_info.value)

        assert isinstance(normalized, TransportError)
        assert normalized.code == 500
