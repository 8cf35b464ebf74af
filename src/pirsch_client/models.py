"""Tracking payloads and statistics filters."""

from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Any, Literal, TypedDict

Scalar = str | int | float | bool
Scale = Literal["day", "week", "month", "year"]


class Hit(TypedDict, total=False):
    """Page view data. ``url`` and ``ip`` are mandatory for server-side hits.

    Any additional keys are sent to the API as is.
    """

    url: str
    ip: str
    dnt: str
    user_agent: str
    accept_language: str
    sec_ch_ua: str
    sec_ch_ua_mobile: str
    sec_ch_ua_platform: str
    sec_ch_ua_platform_version: str
    sec_ch_width: str
    sec_ch_viewport_width: str
    referrer: str
    title: str
    screen_width: int
    screen_height: int


class Session(TypedDict, total=False):
    """Data identifying the visitor session to keep alive."""

    ip: str
    dnt: str
    user_agent: str
    sec_ch_ua: str
    sec_ch_ua_mobile: str
    sec_ch_ua_platform: str
    sec_ch_ua_platform_version: str
    sec_ch_width: str
    sec_ch_viewport_width: str
    time: str


class BatchEvent(TypedDict, total=False):
    """A single item of ``batch_events``. ``name``, ``hit`` and ``time`` are required."""

    name: str
    hit: Hit
    time: str | datetime
    duration: int
    meta: Mapping[str, Scalar]


def stringify_scalar(value: Scalar) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def prepare_meta(meta: Mapping[str, Scalar] | None) -> dict[str, str] | None:
    """Coerce event metadata values to strings. ``None`` stays ``None``."""
    if meta is None:
        return None
    return {key: value if isinstance(value, str) else stringify_scalar(value) for key, value in meta.items()}


@dataclass
class Filter:
    """Narrows a statistics query.

    ``id`` (the domain ID), ``from_date`` and ``to_date`` are required; the
    time of day is ignored by the API. All other fields are optional
    dimension filters.
    """

    id: str
    from_date: date
    to_date: date
    start: int | None = None
    scale: Scale | None = None
    tz: str | None = None
    path: str | None = None
    pattern: str | None = None
    entry_path: str | None = None
    exit_path: str | None = None
    event: str | None = None
    event_meta_key: str | None = None
    language: str | None = None
    country: str | None = None
    city: str | None = None
    referrer: str | None = None
    referrer_name: str | None = None
    os: str | None = None
    browser: str | None = None
    platform: str | None = None
    screen_class: str | None = None
    screen_width: int | None = None
    screen_height: int | None = None
    utm_source: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None
    utm_content: str | None = None
    utm_term: str | None = None
    limit: int | None = None
    include_avg_time_on_page: bool | None = None

    def to_params(self) -> dict[str, str]:
        """Serialize to query parameters, omitting unset fields."""
        params: dict[str, str] = {}
        for field_ in fields(self):
            value = getattr(self, field_.name)
            if value is None:
                continue
            name = {"from_date": "from", "to_date": "to"}.get(field_.name, field_.name)
            params[name] = _query_value(value)
        return params


def filter_params(filter: Filter | Mapping[str, Any]) -> dict[str, str]:
    """Query parameters for a ``Filter`` or a plain mapping of filter fields."""
    if isinstance(filter, Filter):
        return filter.to_params()
    return {key: _query_value(value) for key, value in filter.items() if value is not None}


def _query_value(value: Any) -> str:
    # datetime is a date subclass; the API only takes the date part
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
