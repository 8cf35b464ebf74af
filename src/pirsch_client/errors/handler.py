"""Error normalization for HTTP responses and transport failures."""

import logging

import httpx

from pirsch_client.errors.exceptions import (
    AuthenticationError,
    PirschApiError,
    TransportError,
    UnknownError,
)
from pirsch_client.errors.models import ErrorResponse

logger = logging.getLogger(__name__)


def error_from_response(response: httpx.Response) -> PirschApiError:
    """Build the normalized error for an HTTP error response.

    Parses the API error body if present; a 401 maps to
    ``AuthenticationError``, any other status to ``TransportError``.

    Args:
        response: HTTP response object

    Returns:
        PirschApiError subclass based on status code
    """
    body = ErrorResponse.from_response(response)
    messages = body.error if body else None
    validation = body.validation if body else None

    if response.status_code == 401:
        return AuthenticationError(messages, validation=validation, response=response)

    return TransportError(response.status_code, messages, validation=validation, response=response)


def raise_for_status(response: httpx.Response) -> None:
    """Raise the normalized error for HTTP error responses.

    Args:
        response: HTTP response object

    Raises:
        PirschApiError subclass based on status code
    """
    if response.is_success:
        return
    raise error_from_response(response)


def normalize_error(error: BaseException) -> PirschApiError:
    """Map any failure onto a ``PirschApiError``.

    Never raises. Errors that are already normalized are returned unchanged.

    Args:
        error: The exception raised by a transport

    Returns:
        The normalized error
    """
    if isinstance(error, PirschApiError):
        return error

    if isinstance(error, httpx.HTTPStatusError):
        return error_from_response(error.response)

    if isinstance(error, httpx.HTTPError):
        # Timeouts, connection and protocol errors carry no status code
        message = str(error) or type(error).__name__
        logger.debug(f"Normalizing transport failure: {message}")
        return TransportError(500, [message])

    return UnknownError(str(error) or repr(error))
