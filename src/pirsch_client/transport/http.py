"""httpx-based transport for Pirsch clients.

## Example

```python
from pirsch_client.transport.http import HttpxTransport

transport = HttpxTransport(base_url="https://api.pirsch.io", timeout=5000)

async with transport:
    domains = await transport.get("/api/v1/domain", headers={"Authorization": "Bearer ..."})
```

Tests can route requests through ``httpx.MockTransport``:

```python
transport = HttpxTransport(
    base_url="https://api.pirsch.io",
    transport=httpx.MockTransport(handler),
)
```
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from pirsch_client.constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from pirsch_client.errors.exceptions import PirschApiError
from pirsch_client.errors.handler import normalize_error, raise_for_status

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Transport backed by a shared ``httpx.AsyncClient``.

    Non-2xx responses raise the normalized ``PirschApiError``; network
    failures and timeouts raise ``httpx`` exceptions, which
    ``normalize_error`` maps to ``TransportError``.

    Args:
        base_url: Root URL all request paths are relative to
        timeout: Per-request timeout in milliseconds (default: 5000)
        transport: Optional underlying httpx transport (e.g. ``httpx.MockTransport``)
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout / 1000, transport=transport)

    async def __aenter__(self):
        """Enter async context, delegating to the wrapped client."""
        await self._client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context, delegating to the wrapped client."""
        return await self._client.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send a GET request and return the decoded body."""
        response = await self._client.get(path, headers=headers, params=dict(params) if params else None)
        return self._decode(response)

    async def post(
        self,
        path: str,
        data: Any,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Send a JSON POST request and return the decoded body."""
        response = await self._client.post(path, json=data, headers=headers)
        return self._decode(response)

    def normalize_error(self, error: BaseException) -> PirschApiError:
        return normalize_error(error)

    def _decode(self, response: httpx.Response) -> Any:
        raise_for_status(response)

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError:
            logger.debug(f"Response of {response.request.method} {response.request.url} is not JSON")
            return None
