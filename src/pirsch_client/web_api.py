"""Client restricted to access tokens, for code that must never hold OAuth secrets."""

from pirsch_client.auth.exceptions import ConfigurationError
from pirsch_client.config import ClientConfig
from pirsch_client.core import PirschCoreClient
from pirsch_client.transport.base import Transport


class PirschWebApiClient(PirschCoreClient):
    """Access-token client for the Pirsch API.

    Tracking calls work as usual; statistics calls raise
    ``InvalidAccessModeError`` since access tokens cannot read data.

    Raises:
        ConfigurationError: If OAuth secrets are passed.
    """

    def __init__(self, config: ClientConfig, transport: Transport | None = None) -> None:
        if config.client_id is not None or config.client_secret is not None:
            raise ConfigurationError("Do not pass OAuth secrets such as 'client_id' or 'client_secret' to the web client!")

        super().__init__(config, transport)
