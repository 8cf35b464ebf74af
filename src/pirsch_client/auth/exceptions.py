"""Exceptions raised while validating client configuration and credentials.

These are raised synchronously by client constructors, before any network
activity, and are never retried.

Example:
    ```python
    from pirsch_client.auth.exceptions import ConfigurationError

    try:
        client = PirschClient(ServerClientConfig(hostname="example.com", client_id="short"))
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}")
    ```
"""


class ConfigurationError(ValueError):
    """Base exception for invalid client configuration.

    All credential-specific exceptions inherit from this class,
    making it easy to catch any construction-time error.
    """

    pass


class MissingCredentialsError(ConfigurationError):
    """Raised when neither OAuth credentials nor an access token were supplied."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "Missing credentials, please supply either 'client_id' and 'client_secret' or 'access_token'!"
        )


class ConflictingCredentialsError(ConfigurationError):
    """Raised when OAuth credentials and an access token are supplied together."""

    pass


class InvalidCredentialsError(ConfigurationError):
    """Raised when a supplied credential violates a format constraint.

    Attributes:
        field: The configuration field that failed validation.
        constraint: The violated constraint ("prefix" or "length").

    Example:
        ```python
        try:
            resolver.resolve(ClientConfig(access_token="invalid"))
        except InvalidCredentialsError as e:
            print(f"{e.field} failed the {e.constraint} check")
        ```
    """

    def __init__(self, message: str, field: str, constraint: str):
        """Initialize InvalidCredentialsError.

        Args:
            message: Error message describing the violated constraint.
            field: Name of the offending configuration field.
            constraint: Short name of the violated constraint.
        """
        super().__init__(message)
        self.field = field
        self.constraint = constraint
