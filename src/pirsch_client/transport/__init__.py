"""Transport layer for Pirsch clients.

Clients depend on the ``Transport`` protocol only, so any HTTP library can be
plugged in. ``HttpxTransport`` is the default implementation.

Modules:
    base: The ``Transport`` protocol
    http: httpx-based implementation

Example:
    ```python
    from pirsch_client.transport import HttpxTransport

    transport = HttpxTransport(base_url="https://api.pirsch.io", timeout=5000)
    client = PirschClient(config, transport=transport)
    ```
"""

from pirsch_client.transport.base import Transport
from pirsch_client.transport.http import HttpxTransport

__all__ = ["HttpxTransport", "Transport"]
