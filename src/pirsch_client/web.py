"""Public tracking client using an identification code instead of secrets.

Mirrors what the Pirsch tracking script does in a browser: hits are sent as
GET requests with short query parameters and events are posted with the
identification code. There is no bearer token and no retry.
"""

import logging
import time
from collections.abc import Mapping
from typing import Any
from urllib.parse import SplitResult, urlsplit, urlunsplit

from pirsch_client.auth.credentials import CredentialResolver
from pirsch_client.config import WebClientConfig
from pirsch_client.constants import URL_LENGTH_LIMIT, Endpoint
from pirsch_client.core import build_event, is_dnt
from pirsch_client.models import Hit, Scalar
from pirsch_client.transport.base import Transport
from pirsch_client.transport.http import HttpxTransport

logger = logging.getLogger(__name__)


class PirschWebClient:
    """Client for the public tracking endpoints.

    Args:
        config: Configuration with the identification code of the domain
        transport: Transport to send requests with. Defaults to an
            ``HttpxTransport`` built from ``config``.

    Raises:
        InvalidCredentialsError: If the identification code is malformed.
    """

    def __init__(self, config: WebClientConfig, transport: Transport | None = None) -> None:
        CredentialResolver().validate_identification_code(config.identification_code)

        self.base_url = config.base_url
        self.timeout = config.timeout
        self.identification_code = config.identification_code
        self.hostname = config.hostname

        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(base_url=self.base_url, timeout=self.timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_transport and hasattr(self._transport, "aclose"):
            await self._transport.aclose()

    async def hit(self, hit: Hit) -> None:
        """Send a page view. Dropped silently when DNT is set."""
        if is_dnt(hit):
            logger.debug("Dropping hit with DNT set")
            return

        try:
            await self._transport.get("/" + Endpoint.HIT.value, params=self._hit_parameters(hit))
        except Exception as error:
            self._raise(error)

    async def event(
        self,
        name: str,
        hit: Hit,
        duration: int = 0,
        meta: Mapping[str, Scalar] | None = None,
    ) -> None:
        """Send a custom event. Dropped silently when DNT is set."""
        if is_dnt(hit):
            logger.debug(f"Dropping event '{name}' with DNT set")
            return

        body = {"identification_code": self.identification_code, **build_event(name, hit, duration, meta)}
        if "url" in body:
            body["url"] = self._tracked_url(body["url"])

        try:
            await self._transport.post(
                "/" + Endpoint.EVENT.value,
                body,
                headers={"Content-Type": "application/json"},
            )
        except Exception as error:
            self._raise(error)

    def _raise(self, error: Exception):
        exception = self._transport.normalize_error(error)
        if exception is error:
            raise exception
        raise exception from error

    def _hit_parameters(self, hit: Hit) -> dict[str, Any]:
        parameters: dict[str, Any] = {
            "nc": int(time.time() * 1000),
            "code": self.identification_code,
            "url": self._tracked_url(hit.get("url", "")),
        }

        if hit.get("title"):
            parameters["t"] = hit["title"]
        if hit.get("referrer"):
            parameters["ref"] = hit["referrer"]
        if hit.get("screen_width"):
            parameters["w"] = hit["screen_width"]
        if hit.get("screen_height"):
            parameters["h"] = hit["screen_height"]

        return parameters

    def _tracked_url(self, url: str) -> str:
        """Substitute the configured hostname and cap the URL length."""
        if self.hostname:
            parts = urlsplit(url)
            if parts.hostname:
                url = urlunsplit(parts._replace(netloc=self._tracked_netloc(parts)))
        return url[:URL_LENGTH_LIMIT]

    def _tracked_netloc(self, parts: SplitResult) -> str:
        # SplitResult.hostname is lowercased and need not occur verbatim in netloc
        userinfo, _, _ = parts.netloc.rpartition("@")
        netloc = self.hostname

        try:
            port = parts.port
        except ValueError:
            logger.debug(f"Dropping invalid port of tracked URL host '{parts.hostname}'")
            port = None

        if port is not None:
            netloc = f"{netloc}:{port}"
        if userinfo:
            netloc = f"{userinfo}@{netloc}"
        return netloc
