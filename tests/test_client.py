"""Tests for the server-side client."""

import json

import httpx
import pytest

from pirsch_client import InboundRequest, PirschClient, ServerClientConfig
from pirsch_client.testing import ACCESS_TOKEN, CLIENT_ID, CLIENT_SECRET
from pirsch_client.transport import HttpxTransport


@pytest.fixture
def client(server_config, transport):
    return PirschClient(server_config, transport)


def test_server_client_instantiation(server_config, transport):
    """Test that PirschClient keeps the tracked origin."""
    client = PirschClient(server_config, transport)

    assert client.hostname == "example.com"
    assert client.protocol == "https"
    assert client.trusted_proxy_headers == ()


def test_hit_from_request(client):
    request = InboundRequest(
        path="/blog/post?page=2",
        remote_address="198.51.100.1",
        headers={"User-Agent": "Mozilla/5.0", "Referer": "https://news.example/"},
    )

    hit = client.hit_from_request(request)

    assert hit == {
        "url": "https://example.com/blog/post?page=2",
        "ip": "198.51.100.1",
        "user_agent": "Mozilla/5.0",
        "referrer": "https://news.example/",
    }


def test_hit_from_request_optional_headers(client):
    request = InboundRequest(
        headers={
            "DNT": "1",
            "Accept-Language": "de-DE,de;q=0.9",
            "Sec-CH-UA-Mobile": "?0",
            "Sec-CH-UA-Platform": '"Linux"',
        }
    )

    hit = client.hit_from_request(request)

    assert hit["dnt"] == "1"
    assert hit["accept_language"] == "de-DE,de;q=0.9"
    assert hit["sec_ch_ua_mobile"] == "?0"
    assert hit["sec_ch_ua_platform"] == '"Linux"'
    assert "sec_ch_ua" not in hit
    assert hit["user_agent"] == ""


def test_hit_from_request_referrer_query_parameter(client):
    hit = client.hit_from_request(InboundRequest(path="/?ref=newsletter"))

    assert hit["referrer"] == "newsletter"


def test_hit_from_request_uses_trusted_proxy_header(transport):
    config = ServerClientConfig(
        hostname="example.com",
        protocol="http",
        access_token=ACCESS_TOKEN,
        trusted_proxy_headers=["X-Real-IP", "X-Forwarded-For"],
    )
    client = PirschClient(config, transport)
    request = InboundRequest(
        path="/",
        remote_address="10.0.0.2",
        headers={"x-forwarded-for": "203.0.113.7", "x-real-ip": ""},
    )

    hit = client.hit_from_request(request)

    assert hit["url"] == "http://example.com/"
    assert hit["ip"] == "203.0.113.7"


def test_untrusted_proxy_headers_are_ignored(client):
    request = InboundRequest(remote_address="10.0.0.2", headers={"cf-connecting-ip": "203.0.113.7"})

    assert client.hit_from_request(request)["ip"] == "10.0.0.2"


async def test_asgi_request_is_tracked(client, transport):
    scope = {
        "type": "http",
        "path": "/pricing",
        "query_string": b"",
        "headers": [(b"user-agent", b"Mozilla/5.0")],
        "client": ("198.51.100.2", 51000),
    }
    await client.hit(client.hit_from_request(InboundRequest.from_asgi_scope(scope)))

    (call,) = transport.api_calls
    assert call.path == "/api/v1/hit"
    assert call.data["url"] == "https://example.com/pricing"
    assert call.data["ip"] == "198.51.100.2"


async def test_wsgi_request_with_dnt_is_dropped(client, transport):
    environ = {"PATH_INFO": "/", "REMOTE_ADDR": "198.51.100.1", "HTTP_DNT": "1"}

    await client.hit(client.hit_from_request(InboundRequest.from_wsgi_environ(environ)))

    assert transport.calls == []


async def test_end_to_end_over_http():
    """The token is requested once and reused for the following calls."""
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/api/v1/token":
            return httpx.Response(200, json={"access_token": "token-1", "expires_at": "2030-01-01T00:00:00Z"})
        if request.url.path == "/api/v1/domain":
            return httpx.Response(200, json=[{"id": "domain-id", "hostname": "example.com"}])
        return httpx.Response(200)

    config = ServerClientConfig(hostname="example.com", client_id=CLIENT_ID, client_secret=CLIENT_SECRET)
    transport = HttpxTransport(base_url=config.base_url, transport=httpx.MockTransport(handler))

    async with PirschClient(config, transport) as client:
        domain = await client.domain()
        await client.hit(client.hit_from_request(InboundRequest(path="/", remote_address="198.51.100.1")))

    await transport.aclose()

    assert domain == {"id": "domain-id", "hostname": "example.com"}
    assert [request.url.path for request in seen] == ["/api/v1/token", "/api/v1/domain", "/api/v1/hit"]
    assert json.loads(seen[0].content) == {"client_id": CLIENT_ID, "client_secret": CLIENT_SECRET}
    assert "Authorization" not in seen[0].headers
    assert seen[1].headers["Authorization"] == "Bearer token-1"
    assert seen[2].headers["Authorization"] == "Bearer token-1"
    assert json.loads(seen[2].content)["url"] == "https://example.com/"
