"""The transport protocol the clients depend on."""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pirsch_client.errors.exceptions import PirschApiError


@runtime_checkable
class Transport(Protocol):
    """Performs HTTP calls relative to the API base URL.

    Implementations raise whatever their HTTP library raises; the client
    maps those failures through ``normalize_error``, which must always return
    an error with a status code (500 when unknown) and must never raise.
    """

    async def get(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any: ...

    async def post(
        self,
        path: str,
        data: Any,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Any: ...

    def normalize_error(self, error: BaseException) -> PirschApiError: ...
