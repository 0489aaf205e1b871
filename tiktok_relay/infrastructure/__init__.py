"""Infrastructure layer components.

This module provides the shared HTTP client and the outbound clients for
TikTok and the remote video source.
"""

from tiktok_relay.infrastructure.http_client import HTTPClient
from tiktok_relay.infrastructure.tiktok_api import TikTokAPIClient
from tiktok_relay.infrastructure.tiktok_auth import TikTokAuthClient
from tiktok_relay.infrastructure.video_source import VideoSourceClient

__all__ = ["HTTPClient", "TikTokAPIClient", "TikTokAuthClient", "VideoSourceClient"]
