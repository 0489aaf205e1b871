"""HTTP Client for shared connection management.

This module provides a managed httpx.AsyncClient for reusing
HTTP connections across upload requests.
"""

from contextlib import AbstractAsyncContextManager

import httpx

from tiktok_relay.core.logging import get_logger

logger = get_logger(__name__)


class HTTPClient:
    """Managed HTTP client with connection reuse.

    Designed for DI injection. Create once at application startup,
    inject where needed, close at shutdown. Per-call timeouts are passed
    as ``timeout=`` and override the default.

    Example:
        # In container setup
        http_client = HTTPClient()

        # In service
        response = await http_client.put(upload_url, content=chunk, timeout=180.0)

        # At shutdown
        await http_client.close()
    """

    def __init__(
        self,
        timeout: float = 30.0,
        max_connections: int = 20,
        max_keepalive_connections: int = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize HTTP client.

        Args:
            timeout: Default request timeout in seconds
            max_connections: Maximum number of connections
            max_keepalive_connections: Maximum keepalive connections
            transport: Optional transport (e.g. httpx.MockTransport in tests)
        """
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max_keepalive_connections,
            ),
            follow_redirects=True,
            transport=transport,
        )
        logger.info(
            "HTTP client initialized",
            timeout=timeout,
            max_connections=max_connections,
            max_keepalive=max_keepalive_connections,
        )

    async def post(self, url: str, **kwargs) -> httpx.Response:
        """Send POST request."""
        return await self._client.post(url, **kwargs)

    async def put(self, url: str, **kwargs) -> httpx.Response:
        """Send PUT request."""
        return await self._client.put(url, **kwargs)

    def stream(
        self, method: str, url: str, **kwargs
    ) -> AbstractAsyncContextManager[httpx.Response]:
        """Open a streaming request; use as ``async with``."""
        return self._client.stream(method, url, **kwargs)

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()
        logger.info("HTTP client closed")


__all__ = ["HTTPClient"]
