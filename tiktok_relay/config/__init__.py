"""Upload relay configuration models."""

from tiktok_relay.config.upload import (
    MIB,
    PostInfoConfig,
    PrivacyLevel,
    TikTokUploadConfig,
    TransferConfig,
    UploadMode,
)

__all__ = [
    "MIB",
    "PrivacyLevel",
    "UploadMode",
    "PostInfoConfig",
    "TransferConfig",
    "TikTokUploadConfig",
]
