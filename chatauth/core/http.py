"""Outbound HTTP client factory.

Clients are owned by the integration that creates them (currently only
the Google OAuth client) and closed from the application lifespan.
"""

import httpx

# Seconds
DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_READ_TIMEOUT = 10.0
DEFAULT_WRITE_TIMEOUT = 10.0
DEFAULT_POOL_TIMEOUT = 5.0


def create_http_client(
    base_url: str = "",
    max_connections: int = 20,
    max_keepalive_connections: int = 10,
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: float = DEFAULT_READ_TIMEOUT,
    write_timeout: float = DEFAULT_WRITE_TIMEOUT,
    pool_timeout: float = DEFAULT_POOL_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build a pooled AsyncClient with explicit per-phase timeouts.

    ``transport`` replaces the network layer, e.g. with
    ``httpx.MockTransport`` in tests.
    """
    timeout = httpx.Timeout(
        connect=connect_timeout,
        read=read_timeout,
        write=write_timeout,
        pool=pool_timeout,
    )
    limits = httpx.Limits(
        max_connections=max_connections,
        max_keepalive_connections=max_keepalive_connections,
    )
    return httpx.AsyncClient(
        base_url=base_url, timeout=timeout, limits=limits, transport=transport
    )
