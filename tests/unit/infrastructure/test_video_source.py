"""Unit tests for the remote video source client."""

import httpx
import pytest

from tiktok_relay.core.exceptions import ExternalAPIError
from tiktok_relay.infrastructure.http_client import HTTPClient
from tiktok_relay.infrastructure.video_source import VideoSourceClient

VIDEO_URL = "https://cdn.example.com/clip.mp4"


def _source(handler, **kwargs) -> VideoSourceClient:
    return VideoSourceClient(HTTPClient(transport=httpx.MockTransport(handler)), **kwargs)


@pytest.mark.unit
class TestVideoSourceFetch:
    """Tests for VideoSourceClient.fetch."""

    @pytest.mark.asyncio
    async def test_returns_body(self):
        """Test the full body is returned."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, content=b"x" * 4096)

        video = await _source(handler).fetch(VIDEO_URL)

        assert video == b"x" * 4096
        assert requests[0].method == "GET"
        assert str(requests[0].url) == VIDEO_URL

    @pytest.mark.asyncio
    async def test_uses_download_timeout(self):
        """Test the download carries its own timeout."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, content=b"x")

        await _source(handler, timeout=42.0).fetch(VIDEO_URL)

        assert requests[0].extensions["timeout"]["read"] == 42.0

    @pytest.mark.asyncio
    async def test_non_2xx(self):
        """Test an error status fails with the raw body."""
        source = _source(lambda request: httpx.Response(404, text="Not Found"))

        with pytest.raises(ExternalAPIError) as exc_info:
            await source.fetch(VIDEO_URL)

        assert exc_info.value.reason == "HTTP 404"
        assert exc_info.value.payload == "Not Found"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_empty_body(self):
        """Test an empty video is rejected."""
        source = _source(lambda request: httpx.Response(200, content=b""))

        with pytest.raises(ExternalAPIError) as exc_info:
            await source.fetch(VIDEO_URL)

        assert exc_info.value.reason == "Downloaded video is empty"

    @pytest.mark.asyncio
    async def test_declared_size_over_limit(self):
        """Test Content-Length over the cap fails before reading."""
        source = _source(lambda request: httpx.Response(200, content=b"x" * 11), max_size=10)

        with pytest.raises(ExternalAPIError) as exc_info:
            await source.fetch(VIDEO_URL)

        assert exc_info.value.reason == "Video is 11 bytes, limit is 10"

    @pytest.mark.asyncio
    async def test_streamed_size_over_limit(self):
        """Test a body without Content-Length is capped while streaming."""

        async def body():
            yield b"x" * 6
            yield b"x" * 6

        source = _source(lambda request: httpx.Response(200, content=body()), max_size=10)

        with pytest.raises(ExternalAPIError) as exc_info:
            await source.fetch(VIDEO_URL)

        assert "size limit of 10 bytes" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_size_at_limit_accepted(self):
        """Test a body exactly at the cap is accepted."""
        source = _source(lambda request: httpx.Response(200, content=b"x" * 10), max_size=10)

        assert len(await source.fetch(VIDEO_URL)) == 10

    @pytest.mark.asyncio
    async def test_timeout_propagates(self):
        """Test transport timeouts are raised to the caller."""

        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(httpx.ReadTimeout):
            await _source(handler).fetch(VIDEO_URL)
