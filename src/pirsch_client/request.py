"""Adapters turning inbound server requests into hit data.

Web frameworks expose requests differently, so the server-side client works
on ``InboundRequest``, a minimal view of the path, the socket address and the
headers. Adapters are provided for WSGI environs and ASGI scopes.

Example:
    ```python
    def app(environ, start_response):
        hit = client.hit_from_request(InboundRequest.from_wsgi_environ(environ))
        ...
    ```
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs, urlsplit

from pirsch_client.constants import PROXY_HEADERS, REFERRER_QUERY_PARAMETERS

HeaderValue = str | Sequence[str] | None


@dataclass
class InboundRequest:
    """An inbound HTTP request as seen by a server.

    Attributes:
        path: Request target, path plus optional query string
        remote_address: Address of the connecting socket
        headers: Request headers; lookups are case-insensitive and
            list values resolve to their first element
    """

    path: str = "/"
    remote_address: str = ""
    headers: Mapping[str, HeaderValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._headers = {name.lower(): value for name, value in self.headers.items()}

    def header(self, name: str) -> str | None:
        """Return the first value of header ``name``, if any."""
        value = self._headers.get(name.lower())
        if value is None or isinstance(value, str):
            return value
        return value[0] if value else None

    @classmethod
    def from_wsgi_environ(cls, environ: Mapping[str, Any]) -> "InboundRequest":
        """Build from a WSGI environ (PEP 3333)."""
        path = environ.get("PATH_INFO") or "/"
        query = environ.get("QUERY_STRING")
        if query:
            path = f"{path}?{query}"

        headers: dict[str, str] = {}
        for key, value in environ.items():
            if key.startswith("HTTP_"):
                headers[key[5:].replace("_", "-").lower()] = value

        return cls(path=path, remote_address=environ.get("REMOTE_ADDR") or "", headers=headers)

    @classmethod
    def from_asgi_scope(cls, scope: Mapping[str, Any]) -> "InboundRequest":
        """Build from an ASGI HTTP connection scope."""
        path = scope.get("raw_path") or scope.get("path") or "/"
        if isinstance(path, bytes):
            path = path.decode("latin-1")
        query = scope.get("query_string") or b""
        if query:
            path = f"{path}?{query.decode('latin-1')}"

        headers: dict[str, list[str]] = {}
        for name, value in scope.get("headers") or ():
            headers.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))

        client = scope.get("client")
        return cls(path=path, remote_address=client[0] if client else "", headers=headers)


def build_url(protocol: str, hostname: str, path: str) -> str:
    """Rebuild the visited URL from the configured origin and the request path."""
    if not path.startswith("/"):
        path = "/" + path
    return f"{protocol}://{hostname}{path}"


def get_client_ip(request: InboundRequest, trusted_proxy_headers: Sequence[str] = ()) -> str:
    """Visitor IP from the first trusted proxy header with a value, else the socket."""
    for header in trusted_proxy_headers:
        if header not in PROXY_HEADERS:
            continue
        value = request.header(header)
        if value:
            return value
    return request.remote_address


def get_referrer(request: InboundRequest, url: str) -> str:
    """Referrer from the headers, else from the first referral query parameter."""
    referrer = request.header("referer") or request.header("referrer") or ""

    if referrer:
        return referrer

    query = parse_qs(urlsplit(url).query)
    for name in REFERRER_QUERY_PARAMETERS:
        values = query.get(name)
        if values and values[0]:
            return values[0]

    return ""
