"""Client configuration and environment-based configuration loading.

Configuration objects are plain dataclasses. They can be built directly or
loaded from the environment, in which case values are resolved with the
following priority (highest to lowest):

1. Explicit keyword overrides passed to ``from_env``
2. Environment variable
3. .env file (python-dotenv)
4. Dataclass default

Example:
    ```python
    from pirsch_client.config import ServerClientConfig

    # Explicit configuration
    config = ServerClientConfig(
        hostname="example.com",
        client_id="...",
        client_secret="...",
    )

    # PIRSCH_CLIENT_ID / PIRSCH_CLIENT_SECRET / PIRSCH_HOSTNAME from env or .env
    config = ServerClientConfig.from_env()
    ```

Security Considerations:
    - Secrets are never logged in full (masked with ***)
    - Thread-safe dotenv loading with lock
"""

import logging
import os
from dataclasses import dataclass
from threading import Lock
from typing import Any

from dotenv import load_dotenv

from pirsch_client.auth.exceptions import ConfigurationError
from pirsch_client.constants import DEFAULT_BASE_URL, DEFAULT_PROTOCOL, DEFAULT_TIMEOUT, PROXY_HEADERS

logger = logging.getLogger(__name__)

ENV_CLIENT_ID = "PIRSCH_CLIENT_ID"
ENV_CLIENT_SECRET = "PIRSCH_CLIENT_SECRET"
ENV_ACCESS_TOKEN = "PIRSCH_ACCESS_TOKEN"
ENV_BASE_URL = "PIRSCH_BASE_URL"
ENV_TIMEOUT = "PIRSCH_TIMEOUT"
ENV_HOSTNAME = "PIRSCH_HOSTNAME"
ENV_PROTOCOL = "PIRSCH_PROTOCOL"
ENV_TRUSTED_PROXY_HEADERS = "PIRSCH_TRUSTED_PROXY_HEADERS"
ENV_IDENTIFICATION_CODE = "PIRSCH_IDENTIFICATION_CODE"


class EnvironmentResolver:
    """Resolve configuration values from the environment and a .env file.

    Attributes:
        _dotenv_loaded: Whether .env file has been loaded.
        _dotenv_lock: Thread lock for safe dotenv loading.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        """Initialize the resolver.

        Args:
            dotenv_path: Path to .env file. If None, searches parent directories
                for .env file (default behavior of python-dotenv).
            load_dotenv: Whether to load .env file. Set to False to read only
                the process environment.
        """
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        """Ensure .env file is loaded (thread-safe, at most once)."""
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            # Double-check pattern for thread safety
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for configuration")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    def resolve(
        self,
        *,
        env_var_name: str,
        default: str | None = None,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Resolve a single value from the environment.

        Args:
            env_var_name: Environment variable name to check.
            default: Value returned when the variable is unset.
            mask_in_logs: Mask the value in log messages. Disable for
                non-sensitive values.

        Returns:
            The resolved value, or ``default``.
        """
        if env_var_name in os.environ:
            result = os.environ[env_var_name]
            shown = "***" if mask_in_logs else result
            logger.debug(f"Resolved '{env_var_name}' from environment: {shown}")
            return result
        return default


@dataclass
class BaseConfig:
    """Options shared by every client.

    Attributes:
        base_url: Root URL of the Pirsch API.
        timeout: Per-request timeout in milliseconds.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: int = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ConfigurationError(f"Invalid timeout '{self.timeout}', should be a positive number of milliseconds!")

    @classmethod
    def from_env(
        cls,
        *,
        dotenv_path: str | None = None,
        load_dotenv: bool = True,
        **overrides: Any,
    ):
        """Build a configuration from ``PIRSCH_*`` environment variables.

        Args:
            dotenv_path: Optional path to a .env file.
            load_dotenv: Whether to load a .env file at all.
            **overrides: Explicit field values, taking precedence over the
                environment.

        Raises:
            ConfigurationError: If a value cannot be parsed or validated.
        """
        resolver = EnvironmentResolver(dotenv_path=dotenv_path, load_dotenv=load_dotenv)
        values = cls._values_from_env(resolver)
        values.update(overrides)
        return cls(**values)

    @classmethod
    def _values_from_env(cls, resolver: EnvironmentResolver) -> dict[str, Any]:
        values: dict[str, Any] = {}

        base_url = resolver.resolve(env_var_name=ENV_BASE_URL, mask_in_logs=False)
        if base_url:
            values["base_url"] = base_url

        timeout = resolver.resolve(env_var_name=ENV_TIMEOUT, mask_in_logs=False)
        if timeout:
            try:
                values["timeout"] = int(timeout)
            except ValueError:
                raise ConfigurationError(f"Invalid {ENV_TIMEOUT} '{timeout}', should be an integer!") from None

        return values


@dataclass
class ClientConfig(BaseConfig):
    """Configuration for clients talking to the authenticated API.

    Supply either ``client_id`` and ``client_secret`` (OAuth) or
    ``access_token``, never both.
    """

    client_id: str | None = None
    client_secret: str | None = None
    access_token: str | None = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(base_url={self.base_url!r}, timeout={self.timeout!r}, "
            f"client_id={'***' if self.client_id else None}, "
            f"client_secret={'***' if self.client_secret else None}, "
            f"access_token={'***' if self.access_token else None})"
        )

    @classmethod
    def _values_from_env(cls, resolver: EnvironmentResolver) -> dict[str, Any]:
        values = super()._values_from_env(resolver)
        for field_name, env_var_name in (
            ("client_id", ENV_CLIENT_ID),
            ("client_secret", ENV_CLIENT_SECRET),
            ("access_token", ENV_ACCESS_TOKEN),
        ):
            value = resolver.resolve(env_var_name=env_var_name)
            if value:
                values[field_name] = value
        return values


@dataclass(repr=False)
class ServerClientConfig(ClientConfig):
    """Configuration for server-side tracking clients.

    Attributes:
        hostname: Hostname of the tracked website.
        protocol: Protocol used to rebuild visited URLs ("http" or "https").
        trusted_proxy_headers: Proxy headers to take the visitor IP from,
            checked in order.
    """

    hostname: str = ""
    protocol: str = DEFAULT_PROTOCOL
    trusted_proxy_headers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        super().__post_init__()

        if not self.hostname:
            raise ConfigurationError("Missing hostname, please supply the hostname of the tracked website!")

        if self.protocol not in ("http", "https"):
            raise ConfigurationError(f"Invalid protocol '{self.protocol}', should be 'http' or 'https'!")

        headers = tuple(header.lower() for header in self.trusted_proxy_headers)
        for header in headers:
            if header not in PROXY_HEADERS:
                raise ConfigurationError(
                    f"Invalid trusted proxy header '{header}', should be one of {', '.join(PROXY_HEADERS)}!"
                )
        self.trusted_proxy_headers = headers

    @classmethod
    def _values_from_env(cls, resolver: EnvironmentResolver) -> dict[str, Any]:
        values = super()._values_from_env(resolver)

        hostname = resolver.resolve(env_var_name=ENV_HOSTNAME, mask_in_logs=False)
        if hostname:
            values["hostname"] = hostname

        protocol = resolver.resolve(env_var_name=ENV_PROTOCOL, mask_in_logs=False)
        if protocol:
            values["protocol"] = protocol

        headers = resolver.resolve(env_var_name=ENV_TRUSTED_PROXY_HEADERS, mask_in_logs=False)
        if headers:
            values["trusted_proxy_headers"] = tuple(h.strip() for h in headers.split(",") if h.strip())

        return values


@dataclass
class WebClientConfig(BaseConfig):
    """Configuration for identification-code (public) tracking clients.

    Attributes:
        identification_code: The public identification code of the domain.
        hostname: Optional hostname replacing the one of tracked URLs.
    """

    identification_code: str = ""
    hostname: str | None = None

    @classmethod
    def _values_from_env(cls, resolver: EnvironmentResolver) -> dict[str, Any]:
        values = super()._values_from_env(resolver)

        code = resolver.resolve(env_var_name=ENV_IDENTIFICATION_CODE, mask_in_logs=False)
        if code:
            values["identification_code"] = code

        hostname = resolver.resolve(env_var_name=ENV_HOSTNAME, mask_in_logs=False)
        if hostname:
            values["hostname"] = hostname

        return values
