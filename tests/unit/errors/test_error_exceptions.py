"""Tests for normalized API exceptions."""

import pytest

from pirsch_client.errors.exceptions import (
    AuthenticationError,
    DomainNotFoundError,
    InvalidAccessModeError,
    PirschApiError,
    TransportError,
    UnknownError,
)


@pytest.mark.unit
def test_api_error_uses_first_message():
    error = PirschApiError(400, ["first", "second"], {"url": "required"})

    assert str(error) == "first"
    assert error.code == 400
    assert error.messages == ["first", "second"]
    assert error.validation == {"url": "required"}
    assert error.response is None


@pytest.mark.unit
def test_api_error_defaults_to_empty_collections():
    error = PirschApiError(400)

    assert error.messages == []
    assert error.validation == {}
    assert str(error) == "an unknown error occurred!"


@pytest.mark.unit
def test_api_error_404_without_messages():
    assert str(PirschApiError(404)) == "not found"


@pytest.mark.unit
def test_authentication_error_is_401():
    error = AuthenticationError(["token expired"])

    assert error.code == 401
    assert str(error) == "token expired"
    assert isinstance(error, PirschApiError)


@pytest.mark.unit
def test_transport_error_keeps_status():
    error = TransportError(503, ["unavailable"])

    assert error.code == 503
    assert isinstance(error, PirschApiError)


@pytest.mark.unit
def test_unknown_error_is_always_500():
    assert UnknownError("boom").code == 500
    assert UnknownError().code == 500
    assert UnknownError().messages == []
    assert UnknownError("boom").messages == ["boom"]


@pytest.mark.unit
def test_domain_not_found_error():
    error = DomainNotFoundError()

    assert error.code == 404
    assert str(error) == "domain not found!"


@pytest.mark.unit
def test_invalid_access_mode_error_names_method():
    error = InvalidAccessModeError("visitors")

    assert error.code == 401
    assert error.method_name == "visitors"
    assert "'visitors'" in str(error)
    assert "access tokens" in str(error)
