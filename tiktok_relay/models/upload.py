"""Upload request, session and result models.

All values here are request scoped. Nothing is cached or persisted
between requests.
"""

import enum
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUCCESS_MESSAGE = "Video published successfully on TikTok"


class UploadState(str, enum.Enum):
    """Per-request upload lifecycle state."""

    IDLE = "idle"
    AUTHENTICATING = "authenticating"  # Refresh token -> access token
    FETCHING = "fetching"  # Downloading the source video
    SESSION_INIT = "session_init"  # Opening the TikTok upload session
    TRANSFERRING = "transferring"  # PUTting bytes to upload_url
    PUBLISHING = "publishing"  # Chunked mode publish call
    DONE = "done"
    FAILED = "failed"


class UploadRequest(BaseModel):
    """Inbound upload request.

    Attributes:
        video_url: Absolute http(s) URL serving the video
        title: Post title
        description: Post description (may be empty)
        channel_name: Caller's channel label, echoed back in the result
    """

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    video_url: str = Field(..., min_length=1, description="Source video URL")
    title: str = Field(..., min_length=1, max_length=2200, description="Post title")
    description: str = Field(..., description="Post description")
    channel_name: str = Field(..., min_length=1, description="Channel label")

    @field_validator("video_url")
    @classmethod
    def validate_video_url(cls, v: str) -> str:
        """Require an absolute http(s) URL.

        Args:
            v: URL string

        Returns:
            Validated URL

        Raises:
            ValueError: If URL is not absolute http(s)
        """
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("video_url must be an absolute http(s) URL")
        return v


@dataclass(frozen=True)
class AccessToken:
    """Short-lived TikTok access token.

    Attributes:
        value: Bearer token
        expires_in: Lifetime in seconds, if reported
        open_id: TikTok user the token belongs to
        scope: Granted scopes
    """

    value: str = field(repr=False)
    expires_in: int | None = None
    open_id: str | None = None
    scope: str | None = None

    @property
    def authorization(self) -> str:
        """Authorization header value."""
        return f"Bearer {self.value}"


@dataclass(frozen=True)
class UploadSession:
    """Upload session opened by the init call.

    Attributes:
        publish_id: Platform id of the upload/publish session
        upload_url: Signed URL that receives the PUT(s)
    """

    publish_id: str
    upload_url: str


@dataclass
class UploadResult:
    """Outcome of one upload request.

    Attributes:
        success: Whether every step completed
        channel: Channel label from the request
        video_id: Id returned by the publish call
        publish_id: Id of the upload session
        message: Human-readable outcome
        error: Best-available error message on failure
        details: Raw upstream payload on failure
        step: Step that failed
    """

    success: bool
    channel: str | None = None
    video_id: str | None = None
    publish_id: str | None = None
    message: str | None = None
    error: str | None = None
    details: Any = None
    step: UploadState | None = None

    @classmethod
    def completed(cls, channel: str, video_id: str, publish_id: str) -> "UploadResult":
        """Build a success result."""
        return cls(
            success=True,
            channel=channel,
            video_id=video_id,
            publish_id=publish_id,
            message=SUCCESS_MESSAGE,
        )

    @classmethod
    def failed(
        cls,
        error: str,
        details: Any = None,
        channel: str | None = None,
        step: UploadState | None = None,
    ) -> "UploadResult":
        """Build a failure result."""
        return cls(success=False, channel=channel, error=error, details=details, step=step)

    def to_response(self) -> dict[str, Any]:
        """Serialize to the public response envelope.

        Returns:
            Success or failure envelope
        """
        if self.success:
            return {
                "success": True,
                "video_id": self.video_id,
                "publish_id": self.publish_id,
                "message": self.message,
                "channel": self.channel,
            }
        return {
            "success": False,
            "error": self.error,
            "details": self.details,
        }


__all__ = [
    "SUCCESS_MESSAGE",
    "UploadState",
    "UploadRequest",
    "AccessToken",
    "UploadSession",
    "UploadResult",
]
