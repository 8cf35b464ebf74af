"""Credential classification and validation for Pirsch clients.

A client is authenticated in exactly one of two access modes:

1. OAuth: a client ID and secret, exchanged for short-lived access tokens
2. Access token: a static, non-refreshable token (prefixed with ``pa_``)

The resolver inspects a configuration once, at construction time, and returns
the matching credentials variant or raises a ``ConfigurationError``.

Example:
    ```python
    from pirsch_client.auth import CredentialResolver
    from pirsch_client.config import ClientConfig

    resolver = CredentialResolver()
    credentials = resolver.resolve(ClientConfig(access_token="pa_..."))
    assert credentials.access_mode is AccessMode.ACCESS_TOKEN
    ```

Security Considerations:
    - Credentials are never logged (masked with ***)
    - Only the access mode is logged
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from pirsch_client.auth.exceptions import (
    ConflictingCredentialsError,
    InvalidCredentialsError,
    MissingCredentialsError,
)
from pirsch_client.constants import (
    ACCESS_TOKEN_LENGTH,
    ACCESS_TOKEN_PREFIX,
    CLIENT_ID_LENGTH,
    CLIENT_SECRET_LENGTH,
    IDENTIFICATION_CODE_LENGTH,
)

if TYPE_CHECKING:
    from pirsch_client.config import ClientConfig

logger = logging.getLogger(__name__)


class AccessMode(str, Enum):
    """How a client authenticates against the API."""

    OAUTH = "oauth"
    ACCESS_TOKEN = "access-token"


@dataclass(frozen=True)
class OAuthCredentials:
    """OAuth client ID and secret, exchanged for access tokens."""

    client_id: str = field(repr=False)
    client_secret: str = field(repr=False)

    @property
    def access_mode(self) -> AccessMode:
        return AccessMode.OAUTH


@dataclass(frozen=True)
class AccessTokenCredentials:
    """A static access token. Never refreshed."""

    access_token: str = field(repr=False)

    @property
    def access_mode(self) -> AccessMode:
        return AccessMode.ACCESS_TOKEN


Credentials = OAuthCredentials | AccessTokenCredentials


class CredentialResolver:
    """Classify and validate the credentials of a client configuration.

    Resolution rules:
    - ``access_token`` only: validated for prefix and total length
    - ``client_id`` and/or ``client_secret`` only: validated for exact lengths
    - both kinds: rejected as conflicting
    - neither: rejected as missing

    Example:
        ```python
        resolver = CredentialResolver()

        credentials = resolver.resolve(ClientConfig(client_id="...", client_secret="..."))
        if credentials.access_mode is AccessMode.OAUTH:
            ...
        ```
    """

    def resolve(self, config: "ClientConfig") -> Credentials:
        """Resolve the credentials of ``config``.

        Args:
            config: The client configuration.

        Returns:
            ``OAuthCredentials`` or ``AccessTokenCredentials``.

        Raises:
            MissingCredentialsError: If no credentials were supplied.
            ConflictingCredentialsError: If both OAuth credentials and an
                access token were supplied.
            InvalidCredentialsError: If a credential has the wrong format.
        """
        has_token = config.access_token is not None
        has_oauth = config.client_id is not None or config.client_secret is not None

        if has_token and has_oauth:
            raise ConflictingCredentialsError(
                "Conflicting credentials, supply either 'client_id' and 'client_secret' or 'access_token', not both!"
            )

        credentials: Credentials
        if has_token:
            self.validate_access_token(config.access_token)
            credentials = AccessTokenCredentials(access_token=config.access_token)
        elif has_oauth:
            self.validate_oauth_credentials(config.client_id, config.client_secret)
            credentials = OAuthCredentials(client_id=config.client_id, client_secret=config.client_secret)
        else:
            raise MissingCredentialsError()

        logger.debug(f"Resolved credentials for access mode '{credentials.access_mode.value}': ***")
        return credentials

    def validate_oauth_credentials(self, client_id: str | None, client_secret: str | None) -> None:
        """Check client ID and secret lengths.

        Raises:
            InvalidCredentialsError: If either value has the wrong length.
        """
        if client_id is None or len(client_id) != CLIENT_ID_LENGTH:
            raise InvalidCredentialsError(
                f"Invalid Client ID, should be of length '{CLIENT_ID_LENGTH}'!",
                field="client_id",
                constraint="length",
            )

        if client_secret is None or len(client_secret) != CLIENT_SECRET_LENGTH:
            raise InvalidCredentialsError(
                f"Invalid Client Secret, should be of length '{CLIENT_SECRET_LENGTH}'!",
                field="client_secret",
                constraint="length",
            )

    def validate_access_token(self, access_token: str) -> None:
        """Check the access token prefix, then its total length.

        Raises:
            InvalidCredentialsError: If the prefix or length is wrong.
        """
        if not access_token.startswith(ACCESS_TOKEN_PREFIX):
            raise InvalidCredentialsError(
                f"Invalid Access Token, should start with '{ACCESS_TOKEN_PREFIX}'!",
                field="access_token",
                constraint="prefix",
            )

        expected_length = len(ACCESS_TOKEN_PREFIX) + ACCESS_TOKEN_LENGTH
        if len(access_token) != expected_length:
            raise InvalidCredentialsError(
                f"Invalid Access Token, should be of length '{expected_length}'!",
                field="access_token",
                constraint="length",
            )

    def validate_identification_code(self, identification_code: str) -> None:
        """Check the identification code length.

        Raises:
            InvalidCredentialsError: If the code has the wrong length.
        """
        if len(identification_code) != IDENTIFICATION_CODE_LENGTH:
            raise InvalidCredentialsError(
                f"Invalid Identification Code, should be of length '{IDENTIFICATION_CODE_LENGTH}'!",
                field="identification_code",
                constraint="length",
            )
