"""TikTok upload services.

This module provides services for relaying videos to TikTok:
- UploadOrchestrator: five-step upload sequence
- plan_chunks: byte-window planning for chunked uploads
"""

from tiktok_relay.services.uploader.chunking import (
    ChunkPlan,
    ChunkWindow,
    chunk_count,
    content_range,
    plan_chunks,
)
from tiktok_relay.services.uploader.orchestrator import UploadOrchestrator

__all__ = [
    "UploadOrchestrator",
    "ChunkPlan",
    "ChunkWindow",
    "chunk_count",
    "content_range",
    "plan_chunks",
]
