"""TikTok OAuth token client.

This module exchanges the long-lived refresh token for a short-lived
access token. A fresh token is requested for every upload; nothing is
cached or written back.
"""

from tiktok_relay.core.exceptions import ConfigNotFoundError, ExternalAPIError
from tiktok_relay.core.logging import get_logger
from tiktok_relay.infrastructure.http_client import HTTPClient
from tiktok_relay.infrastructure.tiktok_api import SERVICE_NAME, TOKEN_PATH, checked_payload
from tiktok_relay.models.upload import AccessToken

logger = get_logger(__name__)


class TikTokAuthClient:
    """TikTok refresh-token exchange client.

    Example:
        >>> auth = TikTokAuthClient(http_client, client_key, client_secret, refresh_token)
        >>> token = await auth.fetch_access_token()
    """

    def __init__(
        self,
        http_client: HTTPClient,
        client_key: str,
        client_secret: str,
        refresh_token: str,
        base_url: str = "https://open.tiktokapis.com",
        timeout: float = 30.0,
    ) -> None:
        """Initialize TikTok auth client.

        Args:
            http_client: Shared HTTP client from DI
            client_key: TikTok app client key
            client_secret: TikTok app client secret
            refresh_token: Long-lived refresh token
            base_url: TikTok Open API base URL
            timeout: Timeout for the token call

        Raises:
            ConfigNotFoundError: If any credential is blank
        """
        credentials = {
            "TIKTOK_CLIENT_KEY": client_key,
            "TIKTOK_CLIENT_SECRET": client_secret,
            "TIKTOK_REFRESH_TOKEN": refresh_token,
        }
        missing = [name for name, value in credentials.items() if not value or not value.strip()]
        if missing:
            raise ConfigNotFoundError(missing)

        self.http_client = http_client
        self.client_key = client_key
        self._client_secret = client_secret
        self._refresh_token = refresh_token
        self.token_url = f"{base_url.rstrip('/')}{TOKEN_PATH}"
        self.timeout = timeout

    async def fetch_access_token(self) -> AccessToken:
        """Exchange the refresh token for an access token.

        Returns:
            Fresh AccessToken

        Raises:
            ExternalAPIError: If the platform rejects the exchange
            httpx.HTTPError: On transport failure
        """
        response = await self.http_client.post(
            self.token_url,
            data={
                "client_key": self.client_key,
                "client_secret": self._client_secret,
                "grant_type": "refresh_token",
                "refresh_token": self._refresh_token,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=self.timeout,
        )
        payload = checked_payload(response, TOKEN_PATH)

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise ExternalAPIError(
                service=SERVICE_NAME,
                message="access_token missing from token response",
                status_code=response.status_code,
                endpoint=TOKEN_PATH,
                payload=payload,
            )

        rotated = payload.get("refresh_token")
        if rotated and rotated != self._refresh_token:
            logger.info("Platform issued a new refresh token; configured token kept")

        return AccessToken(
            value=str(access_token),
            expires_in=payload.get("expires_in"),
            open_id=payload.get("open_id"),
            scope=payload.get("scope"),
        )


__all__ = ["TikTokAuthClient"]
