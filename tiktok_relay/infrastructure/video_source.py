"""Remote video source client.

Downloads the whole source video into memory. The body is streamed so an
oversized video is rejected as soon as it crosses the size cap.
"""

from tiktok_relay.core.exceptions import ExternalAPIError
from tiktok_relay.core.logging import get_logger
from tiktok_relay.infrastructure.http_client import HTTPClient
from tiktok_relay.infrastructure.tiktok_api import extract_error_message, parse_payload

logger = get_logger(__name__)

SERVICE_NAME = "Video source"


class VideoSourceClient:
    """Fetch video bytes from a URL.

    Attributes:
        http_client: Shared HTTP client from DI
        timeout: Seconds allowed for the download
        max_size: Largest body accepted, in bytes
    """

    def __init__(
        self,
        http_client: HTTPClient,
        timeout: float = 120.0,
        max_size: int = 4096 * 1024 * 1024,
    ) -> None:
        self.http_client = http_client
        self.timeout = timeout
        self.max_size = max_size

    async def fetch(self, url: str) -> bytes:
        """Download the video at ``url``.

        Args:
            url: Source video URL

        Returns:
            Video bytes

        Raises:
            ExternalAPIError: On non-2xx status, empty body, or oversized body
            httpx.HTTPError: On transport failure or timeout
        """
        async with self.http_client.stream("GET", url, timeout=self.timeout) as response:
            if not response.is_success:
                await response.aread()
                payload = parse_payload(response)
                raise ExternalAPIError(
                    service=SERVICE_NAME,
                    message=extract_error_message(payload) or f"HTTP {response.status_code}",
                    status_code=response.status_code,
                    endpoint=url,
                    payload=payload,
                )

            declared = response.headers.get("Content-Length")
            if declared and declared.isdigit() and int(declared) > self.max_size:
                raise ExternalAPIError(
                    service=SERVICE_NAME,
                    message=f"Video is {declared} bytes, limit is {self.max_size}",
                    status_code=response.status_code,
                    endpoint=url,
                )

            buffer = bytearray()
            async for chunk in response.aiter_bytes():
                buffer.extend(chunk)
                if len(buffer) > self.max_size:
                    raise ExternalAPIError(
                        service=SERVICE_NAME,
                        message=f"Video exceeds size limit of {self.max_size} bytes",
                        status_code=response.status_code,
                        endpoint=url,
                    )

        if not buffer:
            raise ExternalAPIError(
                service=SERVICE_NAME,
                message="Downloaded video is empty",
                endpoint=url,
            )

        return bytes(buffer)


__all__ = ["VideoSourceClient"]
