"""Server-side client for tracking visitors from inbound requests."""

from pirsch_client.config import ServerClientConfig
from pirsch_client.core import PirschCoreClient
from pirsch_client.models import Hit
from pirsch_client.request import InboundRequest, build_url, get_client_ip, get_referrer
from pirsch_client.transport.base import Transport

CLIENT_HINT_HEADERS = {
    "sec_ch_ua": "Sec-CH-UA",
    "sec_ch_ua_mobile": "Sec-CH-UA-Mobile",
    "sec_ch_ua_platform": "Sec-CH-UA-Platform",
    "sec_ch_ua_platform_version": "Sec-CH-UA-Platform-Version",
    "sec_ch_width": "Sec-CH-Width",
    "sec_ch_viewport_width": "Sec-CH-Viewport-Width",
}


class PirschClient(PirschCoreClient):
    """Client used in request handlers of the tracked website.

    Call ``hit_from_request`` in every handler you want to track and send the
    result with ``hit``. Filter out unwanted paths (like ``/favicon.ico``)
    yourself.

    Example:
        ```python
        client = PirschClient(ServerClientConfig(hostname="example.com", client_id="...", client_secret="..."))

        async def handler(scope, receive, send):
            await client.hit(client.hit_from_request(InboundRequest.from_asgi_scope(scope)))
        ```
    """

    def __init__(self, config: ServerClientConfig, transport: Transport | None = None) -> None:
        super().__init__(config, transport)
        self.hostname = config.hostname
        self.protocol = config.protocol
        self.trusted_proxy_headers = config.trusted_proxy_headers

    def hit_from_request(self, request: InboundRequest) -> Hit:
        """Collect the hit data of an inbound request.

        Args:
            request: The inbound request

        Returns:
            Hit data ready to be passed to ``hit`` or ``event``
        """
        url = build_url(self.protocol, self.hostname, request.path)

        hit: Hit = {
            "url": url,
            "ip": get_client_ip(request, self.trusted_proxy_headers),
            "user_agent": request.header("user-agent") or "",
            "referrer": get_referrer(request, url),
        }

        dnt = request.header("dnt")
        if dnt is not None:
            hit["dnt"] = dnt

        accept_language = request.header("accept-language")
        if accept_language is not None:
            hit["accept_language"] = accept_language

        for key, header in CLIENT_HINT_HEADERS.items():
            value = request.header(header)
            if value is not None:
                hit[key] = value

        return hit
