"""Pytest configuration and fixtures.

This module provides common fixtures used across all tests, including a
fake TikTok + video CDN served through httpx.MockTransport.
"""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from tiktok_relay.config.upload import MIB, TikTokUploadConfig, TransferConfig, UploadMode
from tiktok_relay.core.logging import setup_logging
from tiktok_relay.infrastructure.http_client import HTTPClient
from tiktok_relay.infrastructure.tiktok_api import (
    DIRECT_POST_INIT_PATH,
    INBOX_INIT_PATH,
    TOKEN_PATH,
    TikTokAPIClient,
)
from tiktok_relay.infrastructure.tiktok_auth import TikTokAuthClient
from tiktok_relay.infrastructure.video_source import VideoSourceClient
from tiktok_relay.models.upload import UploadRequest
from tiktok_relay.services.uploader.orchestrator import UploadOrchestrator

# Setup logging for tests
setup_logging()

VIDEO_URL = "https://cdn.example.com/videos/clip.mp4"
UPLOAD_URL = "https://open-upload.tiktokapis.com/video/?upload_id=7000&upload_token=abc"
INIT_PUBLISH_ID = "v_inbox_file~v2.7000"
PUBLISHED_ID = "v_pub_file~v2.7001"


def make_video(size: int) -> bytes:
    """Deterministic, non-repeating-per-window test payload."""
    pattern = bytes(range(256))
    return (pattern * (size // 256 + 1))[:size]


class FakeTikTok:
    """Fake TikTok Open API plus video CDN.

    Every request is classified as one of ``token``, ``download``, ``init``,
    ``chunk:<n>`` or ``publish`` and recorded in ``calls``. A failure can be
    injected per key as an httpx.Response or an exception.
    """

    def __init__(self, video: bytes) -> None:
        self.video = video
        self.calls: list[tuple[str, httpx.Request]] = []
        self.failures: dict[str, httpx.Response | Exception] = {}
        self._puts = 0

    @property
    def keys(self) -> list[str]:
        return [key for key, _ in self.calls]

    def requests_for(self, prefix: str) -> list[httpx.Request]:
        return [request for key, request in self.calls if key.startswith(prefix)]

    def fail(self, key: str, failure: httpx.Response | Exception) -> None:
        self.failures[key] = failure

    def _classify(self, request: httpx.Request) -> str:
        if request.method == "GET":
            return "download"
        if request.method == "PUT":
            key = f"chunk:{self._puts}"
            self._puts += 1
            return key
        if request.url.path == TOKEN_PATH:
            return "token"
        if request.url.path == INBOX_INIT_PATH:
            return "init"
        if request.url.path == DIRECT_POST_INIT_PATH:
            body = json.loads(request.content)
            return "publish" if "publish_id" in body.get("source_info", {}) else "init"
        return "unknown"

    def handler(self, request: httpx.Request) -> httpx.Response:
        key = self._classify(request)
        self.calls.append((key, request))

        failure = self.failures.get(key)
        if isinstance(failure, Exception):
            raise failure
        if failure is not None:
            return failure

        if key == "token":
            return httpx.Response(
                200,
                json={
                    "access_token": "act.test-token",
                    "expires_in": 86400,
                    "open_id": "user-open-id",
                    "refresh_token": "rft.test-refresh",
                    "refresh_expires_in": 31536000,
                    "scope": "video.upload,video.publish",
                    "token_type": "Bearer",
                },
            )
        if key == "download":
            return httpx.Response(200, content=self.video)
        if key == "init":
            return httpx.Response(
                200,
                json={
                    "data": {"publish_id": INIT_PUBLISH_ID, "upload_url": UPLOAD_URL},
                    "error": {"code": "ok", "message": "", "log_id": "log-init"},
                },
            )
        if key.startswith("chunk:"):
            return httpx.Response(201)
        if key == "publish":
            return httpx.Response(
                200,
                json={
                    "data": {"publish_id": PUBLISHED_ID},
                    "error": {"code": "ok", "message": "", "log_id": "log-publish"},
                },
            )
        return httpx.Response(404)


@pytest.fixture
def upload_request() -> UploadRequest:
    """A valid upload request."""
    return UploadRequest(
        video_url=VIDEO_URL,
        title="Morning headlines",
        description="Top stories of the day",
        channel_name="daily-news",
    )


@pytest.fixture
def make_orchestrator() -> Callable[..., tuple[UploadOrchestrator, FakeTikTok]]:
    """Factory building an orchestrator wired to a FakeTikTok."""

    def _make(
        video_size: int = 2 * MIB,
        mode: UploadMode = UploadMode.CHUNKED,
        chunk_size: int = 10 * MIB,
        max_concurrent_uploads: int = 4,
        **transfer: Any,
    ) -> tuple[UploadOrchestrator, FakeTikTok]:
        fake = FakeTikTok(make_video(video_size))
        http_client = HTTPClient(transport=httpx.MockTransport(fake.handler))
        transfer_config = TransferConfig(mode=mode, chunk_size=chunk_size, **transfer)
        orchestrator = UploadOrchestrator(
            auth_client=TikTokAuthClient(
                http_client,
                client_key="test-client-key",
                client_secret="test-client-secret",
                refresh_token="rft.test-refresh",
            ),
            api_client=TikTokAPIClient(http_client),
            video_source=VideoSourceClient(
                http_client,
                timeout=transfer_config.download_timeout,
                max_size=transfer_config.max_video_size,
            ),
            config=TikTokUploadConfig(
                transfer=transfer_config,
                max_concurrent_uploads=max_concurrent_uploads,
            ),
        )
        return orchestrator, fake

    return _make
