"""Defaults, credential constraints and endpoint paths for the Pirsch API."""

from enum import Enum

DEFAULT_BASE_URL = "https://api.pirsch.io"
DEFAULT_TIMEOUT = 5000  # milliseconds
DEFAULT_PROTOCOL = "https"

API_ROOT = "api"
API_VERSION = "v1"

REFERRER_QUERY_PARAMETERS: tuple[str, ...] = ("ref", "referer", "referrer", "source", "utm_source")

PROXY_HEADERS: tuple[str, ...] = ("cf-connecting-ip", "x-forwarded-for", "forwarded", "x-real-ip")

ACCESS_TOKEN_PREFIX = "pa_"
ACCESS_TOKEN_LENGTH = 45
CLIENT_ID_LENGTH = 32
CLIENT_SECRET_LENGTH = 64
IDENTIFICATION_CODE_LENGTH = 32

URL_LENGTH_LIMIT = 1800

DNT_ENABLED = "1"


class Endpoint(str, Enum):
    """Endpoint paths relative to the versioned API root."""

    AUTHENTICATION = "token"
    HIT = "hit"
    HIT_BATCH = "hit/batch"
    EVENT = "event"
    EVENT_BATCH = "event/batch"
    SESSION = "session"
    SESSION_BATCH = "session/batch"
    DOMAIN = "domain"
    SESSION_DURATION = "statistics/duration/session"
    TIME_ON_PAGE = "statistics/duration/page"
    UTM_SOURCE = "statistics/utm/source"
    UTM_MEDIUM = "statistics/utm/medium"
    UTM_CAMPAIGN = "statistics/utm/campaign"
    UTM_CONTENT = "statistics/utm/content"
    UTM_TERM = "statistics/utm/term"
    TOTAL_VISITORS = "statistics/total"
    VISITORS = "statistics/visitor"
    PAGES = "statistics/page"
    ENTRY_PAGES = "statistics/page/entry"
    EXIT_PAGES = "statistics/page/exit"
    CONVERSION_GOALS = "statistics/goals"
    EVENTS = "statistics/events"
    EVENT_METADATA = "statistics/event/meta"
    LIST_EVENTS = "statistics/event/list"
    GROWTH_RATE = "statistics/growth"
    ACTIVE_VISITORS = "statistics/active"
    TIME_OF_DAY = "statistics/hours"
    LANGUAGE = "statistics/language"
    REFERRER = "statistics/referrer"
    OS = "statistics/os"
    OS_VERSION = "statistics/os/version"
    BROWSER = "statistics/browser"
    BROWSER_VERSION = "statistics/browser/version"
    COUNTRY = "statistics/country"
    CITY = "statistics/city"
    PLATFORM = "statistics/platform"
    SCREEN = "statistics/screen"
    KEYWORDS = "statistics/keywords"
