"""Tests for configuration exceptions."""

import pytest

from pirsch_client.auth.exceptions import (
    ConfigurationError,
    ConflictingCredentialsError,
    InvalidCredentialsError,
    MissingCredentialsError,
)


class TestConfigurationError:
    """Test ConfigurationError base exception."""

    def test_exception_message(self):
        """Test that exception message is preserved."""
        try:
            raise ConfigurationError("Custom error message")
        except ConfigurationError as e:
            assert str(e) == "Custom error message"

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            raise ConfigurationError("Test error")


class TestMissingCredentialsError:
    def test_default_message(self):
        error = MissingCredentialsError()

        assert "client_id" in str(error)
        assert "access_token" in str(error)

    def test_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            raise MissingCredentialsError()


class TestInvalidCredentialsError:
    def test_attributes(self):
        error = InvalidCredentialsError("Invalid Access Token", field="access_token", constraint="prefix")

        assert str(error) == "Invalid Access Token"
        assert error.field == "access_token"
        assert error.constraint == "prefix"

    def test_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            raise InvalidCredentialsError("bad", field="client_id", constraint="length")


def test_conflicting_credentials_error_is_configuration_error():
    with pytest.raises(ConfigurationError):
        raise ConflictingCredentialsError("both")
