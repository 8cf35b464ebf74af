"""Authenticated request core shared by the Pirsch API clients.

The core owns the access token of a client and is the only gateway for
outbound calls. Every call goes through the same dispatch:

1. Send the request with the current access token as bearer credential
2. On failure, normalize the error through the transport
3. For OAuth clients, a 401 on the first attempt refreshes the token and
   resends the request exactly once; anything else is raised

Statistics reads on an OAuth client without a token refresh it before the
first attempt. Tracking writes never do; they rely on the 401 retry.

Token state is a single cell written only by the refresh. Refreshes are
serialized with an ``asyncio.Lock`` so concurrent calls that observed the
same stale token share one refresh.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from pirsch_client.auth.credentials import (
    AccessMode,
    AccessTokenCredentials,
    CredentialResolver,
    OAuthCredentials,
)
from pirsch_client.config import ClientConfig
from pirsch_client.constants import API_ROOT, API_VERSION, DNT_ENABLED, Endpoint
from pirsch_client.errors.exceptions import (
    DomainNotFoundError,
    InvalidAccessModeError,
    PirschApiError,
    UnknownError,
)
from pirsch_client.models import BatchEvent, Filter, Hit, Scalar, Session, filter_params, prepare_meta
from pirsch_client.transport.base import Transport
from pirsch_client.transport.http import HttpxTransport

logger = logging.getLogger(__name__)

StatisticsFilter = Filter | Mapping[str, Any]


def is_dnt(payload: Mapping[str, Any]) -> bool:
    """Whether the payload carries the Do Not Track marker."""
    return payload.get("dnt") == DNT_ENABLED


def build_event(
    name: str,
    hit: Mapping[str, Any],
    duration: int | None = 0,
    meta: Mapping[str, Scalar] | None = None,
    time: str | datetime | None = None,
) -> dict[str, Any]:
    """Merge the event fields and the hit into one request body.

    Hit fields take precedence over event fields with the same key.
    """
    event: dict[str, Any] = {"event_name": name, "event_duration": duration or 0}

    prepared = prepare_meta(meta)
    if prepared is not None:
        event["event_meta"] = prepared

    if time is not None:
        event["time"] = time.isoformat() if isinstance(time, datetime) else time

    event.update(hit)
    return event


class PirschCoreClient:
    """Base client for the authenticated Pirsch API.

    Args:
        config: Client configuration carrying exactly one kind of credentials
        transport: Transport to send requests with. Defaults to an
            ``HttpxTransport`` built from ``config``, which the client closes
            in ``aclose``.

    Raises:
        ConfigurationError: If the credentials are missing, conflicting or
            malformed.

    Example:
        ```python
        async with PirschCoreClient(ClientConfig(client_id="...", client_secret="...")) as client:
            stats = await client.visitors(Filter(id="...", from_date=start, to_date=end))
        ```
    """

    def __init__(self, config: ClientConfig, transport: Transport | None = None) -> None:
        self._credentials = CredentialResolver().resolve(config)

        self.base_url = config.base_url
        self.timeout = config.timeout

        if isinstance(self._credentials, AccessTokenCredentials):
            self._access_token = self._credentials.access_token
        else:
            self._access_token = ""

        self._refresh_lock = asyncio.Lock()
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(base_url=self.base_url, timeout=self.timeout)

    @property
    def access_mode(self) -> AccessMode:
        return self._credentials.access_mode

    @property
    def access_token(self) -> str:
        """The current access token, empty while unauthenticated."""
        return self._access_token

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport and hasattr(self._transport, "aclose"):
            await self._transport.aclose()

    # -------------------------------------------------------------------------
    # Tracking
    # -------------------------------------------------------------------------

    async def hit(self, hit: Hit) -> None:
        """Send a page view. Dropped silently when DNT is set."""
        if is_dnt(hit):
            logger.debug("Dropping hit with DNT set")
            return

        await self._post(Endpoint.HIT, dict(hit))

    async def batch_hits(self, hits: Iterable[Hit]) -> None:
        """Send several page views in one request, without the DNT ones."""
        filtered = [dict(hit) for hit in hits if not is_dnt(hit)]

        if not filtered:
            logger.debug("Dropping empty hit batch")
            return

        await self._post(Endpoint.HIT_BATCH, filtered)

    async def event(
        self,
        name: str,
        hit: Hit,
        duration: int = 0,
        meta: Mapping[str, Scalar] | None = None,
    ) -> None:
        """Send a custom event.

        Args:
            name: Name of the event
            hit: Page view data the event belongs to
            duration: Optional duration of the event in seconds
            meta: Optional metadata; values are sent as strings
        """
        if is_dnt(hit):
            logger.debug(f"Dropping event '{name}' with DNT set")
            return

        await self._post(Endpoint.EVENT, build_event(name, hit, duration, meta))

    async def batch_events(self, events: Iterable[BatchEvent]) -> None:
        """Send several events in one request, without the DNT ones.

        Each item needs ``name``, ``hit`` and ``time`` and may carry
        ``duration`` and ``meta``.
        """
        filtered = [event for event in events if not is_dnt(event["hit"])]

        if not filtered:
            logger.debug("Dropping empty event batch")
            return

        body = [
            build_event(
                event["name"],
                event["hit"],
                event.get("duration", 0),
                event.get("meta"),
                time=event["time"],
            )
            for event in filtered
        ]
        await self._post(Endpoint.EVENT_BATCH, body)

    async def session(self, session: Session) -> None:
        """Keep a visitor session alive. Dropped silently when DNT is set."""
        if is_dnt(session):
            logger.debug("Dropping session with DNT set")
            return

        await self._post(Endpoint.SESSION, dict(session))

    async def batch_sessions(self, sessions: Iterable[Session]) -> None:
        """Keep several sessions alive in one request, without the DNT ones."""
        filtered = [dict(session) for session in sessions if not is_dnt(session)]

        if not filtered:
            logger.debug("Dropping empty session batch")
            return

        await self._post(Endpoint.SESSION_BATCH, filtered)

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    async def domain(self) -> dict[str, Any]:
        """Return the domain this client has access to.

        Raises:
            DomainNotFoundError: If the API returned no domain.
        """
        self._check_access_mode("domain")

        result = await self._get(Endpoint.DOMAIN)

        if isinstance(result, list):
            if not result:
                raise DomainNotFoundError()
            return result[0]

        return result

    async def session_duration(self, filter: StatisticsFilter) -> Any:
        """Session duration grouped by day."""
        return await self._statistics("session_duration", Endpoint.SESSION_DURATION, filter)

    async def time_on_page(self, filter: StatisticsFilter) -> Any:
        """Time spent on pages."""
        return await self._statistics("time_on_page", Endpoint.TIME_ON_PAGE, filter)

    async def utm_source(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("utm_source", Endpoint.UTM_SOURCE, filter)

    async def utm_medium(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("utm_medium", Endpoint.UTM_MEDIUM, filter)

    async def utm_campaign(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("utm_campaign", Endpoint.UTM_CAMPAIGN, filter)

    async def utm_content(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("utm_content", Endpoint.UTM_CONTENT, filter)

    async def utm_term(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("utm_term", Endpoint.UTM_TERM, filter)

    async def total_visitors(self, filter: StatisticsFilter) -> Any:
        """Total visitor statistics for the whole period."""
        return await self._statistics("total_visitors", Endpoint.TOTAL_VISITORS, filter)

    async def visitors(self, filter: StatisticsFilter) -> Any:
        """Visitor statistics grouped by day."""
        return await self._statistics("visitors", Endpoint.VISITORS, filter)

    async def entry_pages(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("entry_pages", Endpoint.ENTRY_PAGES, filter)

    async def exit_pages(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("exit_pages", Endpoint.EXIT_PAGES, filter)

    async def pages(self, filter: StatisticsFilter) -> Any:
        """Page statistics grouped by page."""
        return await self._statistics("pages", Endpoint.PAGES, filter)

    async def conversion_goals(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("conversion_goals", Endpoint.CONVERSION_GOALS, filter)

    async def events(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("events", Endpoint.EVENTS, filter)

    async def event_metadata(self, filter: StatisticsFilter) -> Any:
        """Metadata of a single event, selected by ``event`` and ``event_meta_key``."""
        return await self._statistics("event_metadata", Endpoint.EVENT_METADATA, filter)

    async def list_events(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("list_events", Endpoint.LIST_EVENTS, filter)

    async def growth(self, filter: StatisticsFilter) -> Any:
        """Growth rates for visitors, views, sessions, bounces and time spent."""
        return await self._statistics("growth", Endpoint.GROWTH_RATE, filter)

    async def active_visitors(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("active_visitors", Endpoint.ACTIVE_VISITORS, filter)

    async def time_of_day(self, filter: StatisticsFilter) -> Any:
        """Unique visitors grouped by hour of the day."""
        return await self._statistics("time_of_day", Endpoint.TIME_OF_DAY, filter)

    async def languages(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("languages", Endpoint.LANGUAGE, filter)

    async def referrer(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("referrer", Endpoint.REFERRER, filter)

    async def os(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("os", Endpoint.OS, filter)

    async def os_versions(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("os_versions", Endpoint.OS_VERSION, filter)

    async def browser(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("browser", Endpoint.BROWSER, filter)

    async def browser_versions(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("browser_versions", Endpoint.BROWSER_VERSION, filter)

    async def country(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("country", Endpoint.COUNTRY, filter)

    async def city(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("city", Endpoint.CITY, filter)

    async def platform(self, filter: StatisticsFilter) -> Any:
        return await self._statistics("platform", Endpoint.PLATFORM, filter)

    async def screen(self, filter: StatisticsFilter) -> Any:
        """Screen classes used by visitors."""
        return await self._statistics("screen", Endpoint.SCREEN, filter)

    async def keywords(self, filter: StatisticsFilter) -> Any:
        """Google Search Console keywords with rank and CTR."""
        return await self._statistics("keywords", Endpoint.KEYWORDS, filter)

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    async def _statistics(self, method_name: str, endpoint: Endpoint, filter: StatisticsFilter) -> Any:
        self._check_access_mode(method_name)
        return await self._get(endpoint, filter_params(filter))

    async def _post(self, endpoint: Endpoint, data: Any, retry: bool = True) -> None:
        token = self._access_token

        try:
            await self._transport.post(self._url(endpoint), data, headers=self._headers(token))
        except Exception as error:
            exception = self._transport.normalize_error(error)

            if retry and self._should_refresh(exception):
                logger.warning(f"POST {endpoint.value} was rejected with 401, refreshing access token and retrying")
                await self._refresh_token(token)
                return await self._post(endpoint, data, retry=False)

            self._raise(exception, error)

    async def _get(self, endpoint: Endpoint, params: Mapping[str, Any] | None = None, retry: bool = True) -> Any:
        if retry and not self._access_token and self.access_mode is AccessMode.OAUTH:
            await self._refresh_token("")

        token = self._access_token

        try:
            return await self._transport.get(self._url(endpoint), headers=self._headers(token), params=params)
        except Exception as error:
            exception = self._transport.normalize_error(error)

            if retry and self._should_refresh(exception):
                logger.warning(f"GET {endpoint.value} was rejected with 401, refreshing access token and retrying")
                await self._refresh_token(token)
                return await self._get(endpoint, params, retry=False)

            self._raise(exception, error)

    async def _refresh_token(self, stale_token: str) -> None:
        """Exchange the OAuth credentials for a new access token.

        Skips the exchange when another call replaced ``stale_token`` while
        this one waited for the lock. On failure the token is cleared and the
        normalized error is raised.
        """
        if not isinstance(self._credentials, OAuthCredentials):
            return

        async with self._refresh_lock:
            if self._access_token and self._access_token != stale_token:
                logger.debug("Access token was refreshed concurrently, skipping refresh")
                return

            try:
                result = await self._transport.post(
                    self._url(Endpoint.AUTHENTICATION),
                    {
                        "client_id": self._credentials.client_id,
                        "client_secret": self._credentials.client_secret,
                    },
                    headers={"Content-Type": "application/json"},
                )
            except Exception as error:
                self._access_token = ""
                exception = self._transport.normalize_error(error)
                logger.warning(f"Failed to refresh access token: {exception} (code {exception.code})")
                self._raise(exception, error)

            access_token = result.get("access_token") if isinstance(result, Mapping) else None
            if not isinstance(access_token, str) or not access_token:
                self._access_token = ""
                logger.warning("Token response did not contain an access token")
                raise UnknownError("token response did not contain an access token")

            self._access_token = access_token
            logger.debug("Refreshed access token: ***")

    def _should_refresh(self, exception: PirschApiError) -> bool:
        return self.access_mode is AccessMode.OAUTH and exception.code == 401

    def _check_access_mode(self, method_name: str) -> None:
        if self.access_mode is AccessMode.ACCESS_TOKEN:
            raise InvalidAccessModeError(method_name)

    @staticmethod
    def _raise(exception: PirschApiError, error: BaseException):
        if exception is error:
            raise exception
        raise exception from error

    @staticmethod
    def _headers(token: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }

    @staticmethod
    def _url(endpoint: Endpoint) -> str:
        return "/" + "/".join([API_ROOT, API_VERSION, endpoint.value])
