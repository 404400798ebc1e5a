"""HTTP client utilities for the codesessions SDK."""

import httpx

from codesessions.clients import constants


def create_async_client(
    timeout_seconds: float = constants.DEFAULT_TIMEOUT_SECONDS,
    connect_timeout: float = constants.DEFAULT_CONNECT_TIMEOUT,
    max_connections: int = constants.DEFAULT_MAX_CONNECTIONS,
) -> httpx.AsyncClient:
    """Create an httpx AsyncClient with connection limits and timeouts.

    No retry strategy is mounted: every SDK call issues exactly one
    request and leaves retry decisions to the caller.

    Args:
        timeout_seconds: Remote execution timeout in seconds. The read timeout
            adds a small buffer so the service can report its own timeout first.
        connect_timeout: Connection timeout in seconds (default: 10).
        max_connections: Maximum concurrent connections (default: 10).

    Returns:
        A configured httpx.AsyncClient.
    """
    timeout = httpx.Timeout(
        timeout_seconds + constants.READ_TIMEOUT_BUFFER,
        connect=connect_timeout,
    )
    limits = httpx.Limits(
        max_connections=max_connections,
        max_keepalive_connections=max_connections,
    )
    return httpx.AsyncClient(timeout=timeout, limits=limits)
