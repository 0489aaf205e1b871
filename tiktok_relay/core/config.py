"""Application configuration using Pydantic Settings.

This module defines all application configuration loaded from environment variables.
Configuration is validated at startup, frozen, and injected wherever it is needed.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tiktok_relay import __version__
from tiktok_relay.config.upload import (
    MIB,
    PostInfoConfig,
    PrivacyLevel,
    TikTokUploadConfig,
    TransferConfig,
    UploadMode,
)
from tiktok_relay.core.exceptions import ConfigNotFoundError

APP_VERSION = __version__


class Config(BaseSettings):
    """Application configuration.

    All configuration is loaded from environment variables or .env file.
    Validation happens automatically via Pydantic.

    Example:
        >>> config = Config()
        >>> print(config.port)
        3000
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # ============================================
    # Application Settings
    # ============================================
    app_name: str = Field(default="TikTok Upload Relay", description="Application name")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development", description="Application environment"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )

    # ============================================
    # API Server
    # ============================================
    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=3000, description="API server port", ge=1, le=65535)

    # ============================================
    # TikTok API
    # ============================================
    tiktok_client_key: str = Field(default="", description="TikTok app client key")
    tiktok_client_secret: str = Field(default="", description="TikTok app client secret")
    tiktok_refresh_token: str = Field(default="", description="Long-lived refresh token")
    tiktok_api_base_url: str = Field(
        default="https://open.tiktokapis.com", description="TikTok Open API base URL"
    )
    api_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Timeout for token, init and publish calls"
    )

    # ============================================
    # Upload Settings
    # ============================================
    upload_mode: UploadMode = Field(default=UploadMode.CHUNKED, description="Upload mode")
    chunk_size_mb: int = Field(default=10, ge=1, le=64, description="Chunk size in MiB")
    max_video_size_mb: int = Field(default=4096, ge=1, description="Largest accepted video")
    download_timeout_seconds: float = Field(default=120.0, gt=0)
    chunk_upload_timeout_seconds: float = Field(default=180.0, gt=0)
    single_upload_timeout_seconds: float = Field(default=300.0, gt=0)
    max_concurrent_uploads: int = Field(
        default=4, ge=1, le=64, description="Uploads allowed to run at the same time"
    )

    # ============================================
    # Post Defaults
    # ============================================
    privacy_level: PrivacyLevel = Field(default="SELF_ONLY", description="Post privacy level")
    disable_comment: bool = Field(default=False)
    disable_duet: bool = Field(default=False)
    disable_stitch: bool = Field(default=False)
    video_cover_timestamp_ms: int = Field(default=1000, ge=0)

    @field_validator("tiktok_api_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so endpoint paths can be appended.

        Args:
            v: Base URL string

        Returns:
            Base URL without trailing slash

        Raises:
            ValueError: If URL is not http(s)
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError("tiktok_api_base_url must be an http(s) URL")
        return v.rstrip("/")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode.

        Returns:
            True if app_env is 'development'
        """
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if app_env is 'production'
        """
        return self.app_env == "production"

    @property
    def missing_credentials(self) -> list[str]:
        """Names of TikTok credential variables that are unset or blank."""
        values = {
            "TIKTOK_CLIENT_KEY": self.tiktok_client_key,
            "TIKTOK_CLIENT_SECRET": self.tiktok_client_secret,
            "TIKTOK_REFRESH_TOKEN": self.tiktok_refresh_token,
        }
        return [name for name, value in values.items() if not value.strip()]

    def require_credentials(self) -> None:
        """Fail fast when TikTok credentials are not configured.

        Raises:
            ConfigNotFoundError: If any credential variable is missing
        """
        missing = self.missing_credentials
        if missing:
            raise ConfigNotFoundError(missing)

    def upload_config(self) -> TikTokUploadConfig:
        """Build the typed upload configuration from flat settings.

        Returns:
            TikTokUploadConfig for the orchestrator
        """
        return TikTokUploadConfig(
            post_info=PostInfoConfig(
                privacy_level=self.privacy_level,
                disable_comment=self.disable_comment,
                disable_duet=self.disable_duet,
                disable_stitch=self.disable_stitch,
                video_cover_timestamp_ms=self.video_cover_timestamp_ms,
            ),
            transfer=TransferConfig(
                mode=self.upload_mode,
                chunk_size=self.chunk_size_mb * MIB,
                max_video_size=self.max_video_size_mb * MIB,
                download_timeout=self.download_timeout_seconds,
                chunk_upload_timeout=self.chunk_upload_timeout_seconds,
                single_upload_timeout=self.single_upload_timeout_seconds,
            ),
            max_concurrent_uploads=self.max_concurrent_uploads,
        )


# =============================================================================
# Singleton accessor
# =============================================================================

_config: Config | None = None


def get_config() -> Config:
    """Get the global Config singleton.

    This function provides a lazy-loaded singleton instance of Config.

    Returns:
        The global Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config
