"""Error handling and normalization for Pirsch clients."""

from pirsch_client.errors.exceptions import (
    AuthenticationError,
    DomainNotFoundError,
    InvalidAccessModeError,
    PirschApiError,
    TransportError,
    UnknownError,
)
from pirsch_client.errors.handler import error_from_response, normalize_error, raise_for_status
from pirsch_client.errors.models import ErrorResponse

__all__ = [
    "AuthenticationError",
    "DomainNotFoundError",
    "ErrorResponse",
    "InvalidAccessModeError",
    "PirschApiError",
    "TransportError",
    "UnknownError",
    "error_from_response",
    "normalize_error",
    "raise_for_status",
]
