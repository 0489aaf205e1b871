"""TikTok Content Posting API client.

This module wraps the three Content Posting calls the relay needs:
- init: open an upload session (direct-post or inbox draft)
- PUT: send bytes, whole or as one Content-Range window
- publish: turn an inbox draft into a post

TikTok answers with ``{"data": {...}, "error": {"code": "ok", ...}}``. Any
code other than ``ok`` is treated as a failure even on HTTP 200.
"""

from typing import Any

import httpx

from tiktok_relay.config.upload import PostInfoConfig
from tiktok_relay.core.exceptions import ExternalAPIError
from tiktok_relay.core.logging import get_logger
from tiktok_relay.infrastructure.http_client import HTTPClient
from tiktok_relay.models.upload import AccessToken, UploadSession

logger = get_logger(__name__)

SERVICE_NAME = "TikTok"

TOKEN_PATH = "/v2/oauth/token/"
DIRECT_POST_INIT_PATH = "/v2/post/publish/video/init/"
INBOX_INIT_PATH = "/v2/post/publish/inbox/video/init/"

JSON_CONTENT_TYPE = "application/json; charset=UTF-8"
VIDEO_CONTENT_TYPE = "video/mp4"
SOURCE_FILE_UPLOAD = "FILE_UPLOAD"

# Codes TikTok uses for "no error"
OK_CODES = {"ok", "0"}


def parse_payload(response: httpx.Response) -> Any:
    """Return the response body as JSON, raw text, or None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def extract_error_message(payload: Any) -> str | None:
    """Pick the most useful error message out of a TikTok response body.

    Args:
        payload: Parsed response body

    Returns:
        Error message, or None when the body carries none
    """
    if not isinstance(payload, dict):
        return None

    error = payload.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if message:
            return str(message)
        code = error.get("code")
        if code is not None and str(code) not in OK_CODES:
            return str(code)

    description = payload.get("error_description")
    if description:
        return str(description)

    if isinstance(error, str) and error:
        return error

    return None


def is_error_payload(payload: Any) -> bool:
    """Check whether a 2xx body still reports a platform error."""
    if not isinstance(payload, dict):
        return False
    error = payload.get("error")
    if isinstance(error, dict):
        return str(error.get("code", "ok")) not in OK_CODES
    return bool(error)


def checked_payload(response: httpx.Response, endpoint: str) -> Any:
    """Return the parsed body of a successful TikTok call.

    Args:
        response: HTTP response
        endpoint: Path or URL that was called

    Returns:
        Parsed response body

    Raises:
        ExternalAPIError: On non-2xx status or a TikTok error envelope
    """
    payload = parse_payload(response)
    if response.is_success and not is_error_payload(payload):
        return payload

    message = extract_error_message(payload) or f"HTTP {response.status_code}"
    raise ExternalAPIError(
        service=SERVICE_NAME,
        message=message,
        status_code=response.status_code,
        endpoint=endpoint,
        payload=payload,
    )


def build_post_info(title: str, description: str, config: PostInfoConfig) -> dict[str, Any]:
    """Build the ``post_info`` block shared by direct-post init and publish."""
    return {
        "title": title,
        "description": description,
        "privacy_level": config.privacy_level,
        "disable_comment": config.disable_comment,
        "disable_duet": config.disable_duet,
        "disable_stitch": config.disable_stitch,
        "video_cover_timestamp_ms": config.video_cover_timestamp_ms,
    }


class TikTokAPIClient:
    """TikTok Content Posting API client.

    Example:
        >>> client = TikTokAPIClient(http_client)
        >>> session = await client.init_inbox_upload(token, size, chunk_size, chunks)
        >>> await client.put_bytes(session.upload_url, data, "bytes 0-99/100", timeout=300.0)
        >>> video_id = await client.publish(token, post_info, session)
    """

    def __init__(
        self,
        http_client: HTTPClient,
        base_url: str = "https://open.tiktokapis.com",
        timeout: float = 30.0,
    ) -> None:
        """Initialize TikTok API client.

        Args:
            http_client: Shared HTTP client from DI
            base_url: TikTok Open API base URL
            timeout: Timeout for init and publish calls
        """
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _json_headers(token: AccessToken) -> dict[str, str]:
        return {
            "Authorization": token.authorization,
            "Content-Type": JSON_CONTENT_TYPE,
        }

    async def _post_json(
        self, token: AccessToken, path: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        response = await self.http_client.post(
            self._url(path),
            json=body,
            headers=self._json_headers(token),
            timeout=self.timeout,
        )
        payload = checked_payload(response, path)
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise ExternalAPIError(
                service=SERVICE_NAME,
                message="Response has no data object",
                status_code=response.status_code,
                endpoint=path,
                payload=payload,
            )
        return data

    async def _init_session(
        self, token: AccessToken, path: str, body: dict[str, Any]
    ) -> UploadSession:
        data = await self._post_json(token, path, body)
        publish_id = data.get("publish_id")
        upload_url = data.get("upload_url")
        if not publish_id or not upload_url:
            raise ExternalAPIError(
                service=SERVICE_NAME,
                message="publish_id or upload_url missing from init response",
                endpoint=path,
                payload={"data": data},
            )
        return UploadSession(publish_id=str(publish_id), upload_url=str(upload_url))

    async def init_direct_post(
        self,
        token: AccessToken,
        post_info: dict[str, Any],
        video_size: int,
    ) -> UploadSession:
        """Open a publish-ready session declaring the whole video as one chunk.

        Args:
            token: Access token
            post_info: Post metadata block
            video_size: Video length in bytes

        Returns:
            UploadSession for a single PUT

        Raises:
            ExternalAPIError: If TikTok rejects the call
        """
        body = {
            "post_info": post_info,
            "source_info": {
                "source": SOURCE_FILE_UPLOAD,
                "video_size": video_size,
                "chunk_size": video_size,
                "total_chunk_count": 1,
                "video_url": "",
            },
        }
        return await self._init_session(token, DIRECT_POST_INIT_PATH, body)

    async def init_inbox_upload(
        self,
        token: AccessToken,
        video_size: int,
        chunk_size: int,
        total_chunk_count: int,
    ) -> UploadSession:
        """Open an inbox draft session for a chunked upload.

        Args:
            token: Access token
            video_size: Video length in bytes
            chunk_size: Declared chunk size in bytes
            total_chunk_count: Number of chunks that will be sent

        Returns:
            UploadSession; a publish call is still required afterwards

        Raises:
            ExternalAPIError: If TikTok rejects the call
        """
        body = {
            "source_info": {
                "source": SOURCE_FILE_UPLOAD,
                "video_size": video_size,
                "chunk_size": chunk_size,
                "total_chunk_count": total_chunk_count,
            }
        }
        return await self._init_session(token, INBOX_INIT_PATH, body)

    async def put_bytes(
        self,
        upload_url: str,
        data: bytes,
        content_range: str,
        timeout: float,
    ) -> httpx.Response:
        """PUT one byte range of the video to the session's upload_url.

        Args:
            upload_url: Signed upload URL from init
            data: Bytes of this range
            content_range: Content-Range header value for this range
            timeout: Seconds allowed for this PUT

        Returns:
            The HTTP response

        Raises:
            ExternalAPIError: On a non-2xx response
        """
        headers = {
            "Content-Type": VIDEO_CONTENT_TYPE,
            "Content-Length": str(len(data)),
            "Content-Range": content_range,
        }
        response = await self.http_client.put(
            upload_url,
            content=data,
            headers=headers,
            timeout=timeout,
        )
        if not response.is_success:
            payload = parse_payload(response)
            raise ExternalAPIError(
                service=SERVICE_NAME,
                message=extract_error_message(payload) or f"HTTP {response.status_code}",
                status_code=response.status_code,
                endpoint="upload_url",
                payload=payload,
            )
        return response

    async def publish(
        self,
        token: AccessToken,
        post_info: dict[str, Any],
        session: UploadSession,
    ) -> str:
        """Publish an inbox draft.

        The signed upload_url is passed back as ``source_info.video_url``.

        Args:
            token: Access token
            post_info: Post metadata block
            session: Session whose bytes were uploaded

        Returns:
            publish_id reported by the publish call

        Raises:
            ExternalAPIError: If TikTok rejects the call
        """
        body = {
            "post_info": post_info,
            "source_info": {
                "source": SOURCE_FILE_UPLOAD,
                "video_url": session.upload_url,
                "publish_id": session.publish_id,
            },
        }
        data = await self._post_json(token, DIRECT_POST_INIT_PATH, body)
        publish_id = data.get("publish_id")
        if not publish_id:
            raise ExternalAPIError(
                service=SERVICE_NAME,
                message="publish_id missing from publish response",
                endpoint=DIRECT_POST_INIT_PATH,
                payload={"data": data},
            )
        return str(publish_id)


__all__ = [
    "DIRECT_POST_INIT_PATH",
    "INBOX_INIT_PATH",
    "TOKEN_PATH",
    "TikTokAPIClient",
    "build_post_info",
    "checked_payload",
    "extract_error_message",
    "is_error_payload",
    "parse_payload",
]
