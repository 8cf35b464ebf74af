"""Normalized exceptions for Pirsch API errors."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class PirschApiError(Exception):
    """Base exception for API errors.

    Every failure crossing the client boundary is an instance of this class,
    regardless of the transport that produced it.

    Attributes:
        code: HTTP status code, or 500 when unknown.
        messages: Error messages returned by the API, in order.
        validation: Validation messages keyed by field name.
        response: The raw HTTP response, when there was one.
    """

    def __init__(
        self,
        code: int,
        messages: list[str] | None = None,
        validation: dict[str, str] | None = None,
        response: "httpx.Response | None" = None,
    ):
        self.code = code
        self.messages = list(messages) if messages else []
        self.validation = dict(validation) if validation else {}
        self.response = response
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.messages:
            return self.messages[0]
        if self.code == 404:
            return "not found"
        return "an unknown error occurred!"


class AuthenticationError(PirschApiError):
    """401 Unauthorized."""

    def __init__(self, messages: list[str] | None = None, **kwargs):
        super().__init__(401, messages, **kwargs)


class TransportError(PirschApiError):
    """Network failures, timeouts and non-2xx responses other than 401."""

    pass


class UnknownError(PirschApiError):
    """Failure that could not be normalized. Always code 500."""

    def __init__(self, message: str | None = None):
        super().__init__(500, [message] if message else None)


class DomainNotFoundError(PirschApiError):
    """The domain lookup returned no domain for this client."""

    def __init__(self):
        super().__init__(404, ["domain not found!"])


class InvalidAccessModeError(PirschApiError):
    """A statistics method was called on an access-token client."""

    def __init__(self, method_name: str):
        super().__init__(
            401,
            [
                f"you are trying to run the data-accessing method '{method_name}', "
                "which is not possible with access tokens. please use a oauth id and secret!"
            ],
        )
        self.method_name = method_name
