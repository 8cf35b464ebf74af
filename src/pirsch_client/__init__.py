"""Pirsch Client - async Python client for the Pirsch web analytics API.

This library provides:
- Server-side tracking of hits, events and sessions from inbound requests
- Statistics reads with OAuth token refresh and a single retry on 401
- Access-token and identification-code clients for restricted contexts
- Normalized errors independent of the HTTP transport

Example:
    ```python
    from pirsch_client import Filter, InboundRequest, PirschClient, ServerClientConfig

    client = PirschClient(
        ServerClientConfig(
            hostname="example.com",
            client_id="...",
            client_secret="...",
        )
    )

    # Track a visitor
    await client.hit(client.hit_from_request(InboundRequest.from_asgi_scope(scope)))

    # Read statistics
    visitors = await client.visitors(Filter(id="domain-id", from_date=start, to_date=end))
    ```
"""

from pirsch_client.auth import (
    AccessMode,
    ConfigurationError,
    ConflictingCredentialsError,
    InvalidCredentialsError,
    MissingCredentialsError,
)
from pirsch_client.client import PirschClient
from pirsch_client.config import ClientConfig, ServerClientConfig, WebClientConfig
from pirsch_client.core import PirschCoreClient
from pirsch_client.errors import (
    AuthenticationError,
    DomainNotFoundError,
    InvalidAccessModeError,
    PirschApiError,
    TransportError,
    UnknownError,
)
from pirsch_client.models import Filter, Hit, Session
from pirsch_client.request import InboundRequest
from pirsch_client.transport import HttpxTransport, Transport
from pirsch_client.web import PirschWebClient
from pirsch_client.web_api import PirschWebApiClient

__version__ = "0.1.0"

__all__ = [
    "AccessMode",
    "AuthenticationError",
    "ClientConfig",
    "ConfigurationError",
    "ConflictingCredentialsError",
    "DomainNotFoundError",
    "Filter",
    "Hit",
    "HttpxTransport",
    "InboundRequest",
    "InvalidAccessModeError",
    "InvalidCredentialsError",
    "MissingCredentialsError",
    "PirschApiError",
    "PirschClient",
    "PirschCoreClient",
    "PirschWebApiClient",
    "PirschWebClient",
    "ServerClientConfig",
    "Session",
    "Transport",
    "TransportError",
    "UnknownError",
    "WebClientConfig",
    "__version__",
]
