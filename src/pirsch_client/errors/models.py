"""Error body models for the Pirsch API."""

from dataclasses import dataclass, field
from typing import Any

import httpx


@dataclass
class ErrorResponse:
    """Error body returned by the API on failure.

    Wire shape: ``{"error": ["..."], "validation": {"field": "message"}}``
    """

    error: list[str] = field(default_factory=list)
    validation: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_data(cls, data: Any) -> "ErrorResponse | None":
        """Parse an already decoded error body.

        Args:
            data: Decoded JSON body

        Returns:
            ErrorResponse object or None if the body has neither field
        """
        if not isinstance(data, dict):
            return None
        if "error" not in data and "validation" not in data:
            return None

        errors = data.get("error") or []
        if isinstance(errors, str):
            errors = [errors]
        elif not isinstance(errors, list):
            errors = [str(errors)]

        validation = data.get("validation") or {}
        if not isinstance(validation, dict):
            validation = {}

        return cls(
            error=[str(message) for message in errors],
            validation={str(key): str(value) for key, value in validation.items()},
        )

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ErrorResponse | None":
        """Parse the error body of an HTTP response.

        Args:
            response: HTTP response object

        Returns:
            ErrorResponse object or None if the body is not an API error
        """
        try:
            data = response.json()
        except (ValueError, TypeError, AttributeError, httpx.ResponseNotRead):
            # JSON decode errors, streamed bodies, or missing .json() method
            return None
        return cls.from_data(data)
