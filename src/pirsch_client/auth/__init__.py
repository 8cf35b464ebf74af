"""Authentication components for Pirsch clients.

This module provides:
- Credential classification into OAuth or access-token mode
- Validation of client IDs, secrets, access tokens and identification codes
- Construction-time configuration errors

Example:
    ```python
    from pirsch_client.auth import CredentialResolver

    credentials = CredentialResolver().resolve(config)
    ```
"""

from pirsch_client.auth.credentials import (
    AccessMode,
    AccessTokenCredentials,
    CredentialResolver,
    Credentials,
    OAuthCredentials,
)
from pirsch_client.auth.exceptions import (
    ConfigurationError,
    ConflictingCredentialsError,
    InvalidCredentialsError,
    MissingCredentialsError,
)

__all__ = [
    "AccessMode",
    "AccessTokenCredentials",
    "ConfigurationError",
    "ConflictingCredentialsError",
    "CredentialResolver",
    "Credentials",
    "InvalidCredentialsError",
    "MissingCredentialsError",
    "OAuthCredentials",
]
