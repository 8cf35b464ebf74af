"""Testing utilities for Pirsch clients.

This module provides an in-memory transport that records calls and replays
scripted responses, plus well-formed sample credentials.

Example:
    ```python
    from pirsch_client.testing import CLIENT_ID, CLIENT_SECRET, RecordingTransport


    async def test_visitors():
        transport = RecordingTransport()
        transport.queue("POST", "/api/v1/token", {"access_token": "token"})
        transport.queue("GET", "/api/v1/statistics/visitor", [{"visitors": 42}])

        client = PirschCoreClient(ClientConfig(client_id=CLIENT_ID, client_secret=CLIENT_SECRET), transport)
        assert await client.visitors({"id": "domain"}) == [{"visitors": 42}]
    ```
"""

import asyncio
from collections import defaultdict, deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pirsch_client.constants import ACCESS_TOKEN_LENGTH, ACCESS_TOKEN_PREFIX
from pirsch_client.errors.exceptions import AuthenticationError, PirschApiError, TransportError
from pirsch_client.errors.handler import normalize_error

CLIENT_ID = "c" * 32
CLIENT_SECRET = "s" * 64
ACCESS_TOKEN = ACCESS_TOKEN_PREFIX + "a" * ACCESS_TOKEN_LENGTH
IDENTIFICATION_CODE = "i" * 32

AUTHENTICATION_PATH = "/api/v1/token"


@dataclass
class RecordedCall:
    """A request seen by ``RecordingTransport``."""

    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] | None = None
    data: Any = None

    @property
    def bearer(self) -> str | None:
        authorization = self.headers.get("Authorization")
        if authorization and authorization.startswith("Bearer "):
            return authorization[len("Bearer ") :]
        return None


class RecordingTransport:
    """Transport double returning queued responses per method and path.

    Queued values that are exceptions are raised; anything else is returned
    as the decoded body. Unqueued calls return ``None``. Every call yields to
    the event loop once, like real network I/O.
    """

    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self._responses: dict[tuple[str, str], deque[Any]] = defaultdict(deque)

    def queue(self, method: str, path: str, *responses: Any) -> None:
        self._responses[(method, path)].extend(responses)

    def queue_status(self, method: str, path: str, code: int, messages: list[str] | None = None) -> None:
        """Queue an HTTP error with the given status code."""
        error = AuthenticationError(messages) if code == 401 else TransportError(code, messages)
        self.queue(method, path, error)

    @property
    def refresh_calls(self) -> list[RecordedCall]:
        return [call for call in self.calls if call.path == AUTHENTICATION_PATH]

    @property
    def api_calls(self) -> list[RecordedCall]:
        """All calls except token refreshes."""
        return [call for call in self.calls if call.path != AUTHENTICATION_PATH]

    async def get(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        self.calls.append(
            RecordedCall("GET", path, dict(headers or {}), params=dict(params) if params is not None else None)
        )
        await asyncio.sleep(0)
        return self._next("GET", path)

    async def post(
        self,
        path: str,
        data: Any,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        self.calls.append(RecordedCall("POST", path, dict(headers or {}), data=data))
        await asyncio.sleep(0)
        return self._next("POST", path)

    def normalize_error(self, error: BaseException) -> PirschApiError:
        return normalize_error(error)

    def _next(self, method: str, path: str) -> Any:
        responses = self._responses.get((method, path))
        if not responses:
            return None
        response = responses.popleft()
        if isinstance(response, BaseException):
            raise response
        return response


__all__ = [
    "ACCESS_TOKEN",
    "CLIENT_ID",
    "CLIENT_SECRET",
    "IDENTIFICATION_CODE",
    "RecordedCall",
    "RecordingTransport",
]
