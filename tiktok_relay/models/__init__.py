"""Request-scoped value models."""

from tiktok_relay.models.upload import (
    SUCCESS_MESSAGE,
    AccessToken,
    UploadRequest,
    UploadResult,
    UploadSession,
    UploadState,
)

__all__ = [
    "SUCCESS_MESSAGE",
    "AccessToken",
    "UploadRequest",
    "UploadResult",
    "UploadSession",
    "UploadState",
]
