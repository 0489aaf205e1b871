"""TikTok upload configuration models.

This module provides typed Pydantic configuration for the upload relay:
- Upload mode (single-shot vs. chunked two-phase)
- Post metadata defaults (privacy level, interaction flags, cover frame)
- Transfer limits and per-call timeouts
"""

import enum
from typing import Literal

from pydantic import BaseModel, Field

MIB = 1024 * 1024

PrivacyLevel = Literal[
    "PUBLIC_TO_EVERYONE",
    "MUTUAL_FOLLOW_FRIENDS",
    "FOLLOWER_OF_CREATOR",
    "SELF_ONLY",
]


class UploadMode(str, enum.Enum):
    """How the video bytes reach TikTok.

    The two modes are not interchangeable. CHUNKED opens an inbox draft and
    needs a separate publish call; SINGLE_SHOT's init call already publishes.
    """

    SINGLE_SHOT = "single_shot"  # One PUT, init doubles as publish
    CHUNKED = "chunked"  # Range-addressed PUTs, then a publish call


class PostInfoConfig(BaseModel):
    """Defaults applied to every post.

    Attributes:
        privacy_level: Who can see the published video
        disable_comment: Turn comments off
        disable_duet: Turn duets off
        disable_stitch: Turn stitches off
        video_cover_timestamp_ms: Frame used as the cover image
    """

    privacy_level: PrivacyLevel = Field(default="SELF_ONLY", description="Post privacy level")
    disable_comment: bool = Field(default=False, description="Disable comments")
    disable_duet: bool = Field(default=False, description="Disable duets")
    disable_stitch: bool = Field(default=False, description="Disable stitches")
    video_cover_timestamp_ms: int = Field(
        default=1000, ge=0, description="Cover frame timestamp in milliseconds"
    )


class TransferConfig(BaseModel):
    """Configuration for moving bytes from the source URL to TikTok.

    Attributes:
        mode: Upload mode selected at deployment time
        chunk_size: Chunk size in bytes (CHUNKED mode only)
        max_video_size: Largest source video accepted, in bytes
        download_timeout: Seconds allowed for the source download
        chunk_upload_timeout: Seconds allowed per chunk PUT
        single_upload_timeout: Seconds allowed for the single-shot PUT
    """

    mode: UploadMode = Field(default=UploadMode.CHUNKED, description="Upload mode")
    chunk_size: int = Field(default=10 * MIB, ge=1, description="Chunk size in bytes")
    max_video_size: int = Field(default=4096 * MIB, ge=1, description="Max source size in bytes")
    download_timeout: float = Field(default=120.0, gt=0, description="Download timeout")
    chunk_upload_timeout: float = Field(default=180.0, gt=0, description="Per-chunk PUT timeout")
    single_upload_timeout: float = Field(
        default=300.0, gt=0, description="Single-shot PUT timeout"
    )


class TikTokUploadConfig(BaseModel):
    """Complete upload relay configuration.

    All sub-configs have defaults and can be used without explicit configuration.

    Attributes:
        post_info: Post metadata defaults
        transfer: Transfer mode and limits
        max_concurrent_uploads: Uploads allowed to run at the same time
    """

    post_info: PostInfoConfig = Field(default_factory=PostInfoConfig)
    transfer: TransferConfig = Field(default_factory=TransferConfig)
    max_concurrent_uploads: int = Field(default=4, ge=1, le=64)


__all__ = [
    "MIB",
    "PrivacyLevel",
    "UploadMode",
    "PostInfoConfig",
    "TransferConfig",
    "TikTokUploadConfig",
]
