"""Custom exceptions for the TikTok upload relay.

This module defines all custom exceptions used throughout the application.
All exceptions inherit from RelayError for easy catching.

Exception classes include context dictionaries for structured logging
and debugging. Use the `context` property to access additional details.
"""

from typing import Any


class RelayError(Exception):
    """Base exception for all relay errors.

    All custom exceptions in the application should inherit from this class.
    Provides a context dictionary for structured error information.

    Attributes:
        context: Dictionary with additional error context

    Example:
        >>> try:
        ...     raise RelayError("Something went wrong", context={"channel": "news"})
        ... except RelayError as e:
        ...     print(f"Error: {e}, Context: {e.context}")
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize RelayError.

        Args:
            message: Error message
            context: Optional dictionary with additional context
        """
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization.

        Returns:
            Dictionary with error type, message, and context
        """
        return {
            "error_type": self.__class__.__name__,
            "message": str(self),
            "context": self.context,
        }


# ============================================
# Configuration Errors
# ============================================


class ConfigError(RelayError):
    """Base exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ConfigError.

        Args:
            message: Error message
            config_key: Environment variable or setting name
            context: Additional context
        """
        ctx = context or {}
        if config_key:
            ctx["config_key"] = config_key
        super().__init__(message, context=ctx)


class ConfigNotFoundError(ConfigError):
    """Raised when required configuration values are missing.

    Attributes:
        missing: Names of the missing environment variables
    """

    def __init__(
        self,
        missing: list[str],
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ConfigNotFoundError.

        Args:
            missing: Names of the missing environment variables
            context: Additional context
        """
        ctx = context or {}
        ctx["missing"] = list(missing)
        self.missing = list(missing)
        super().__init__(
            f"Required configuration not set: {', '.join(missing)}",
            context=ctx,
        )


# ============================================
# Service Errors
# ============================================


class ServiceError(RelayError):
    """Base exception for service-related errors."""

    def __init__(
        self,
        message: str,
        service_name: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ServiceError.

        Args:
            message: Error message
            service_name: Name of the service
            context: Additional context
        """
        ctx = context or {}
        if service_name:
            ctx["service_name"] = service_name
        super().__init__(message, context=ctx)


class ExternalAPIError(ServiceError):
    """Raised when an external API call fails.

    Attributes:
        service: Name of the external service
        status_code: HTTP status code (if applicable)
        endpoint: API endpoint that was called
        payload: Parsed response body, or raw text when it was not JSON
        reason: Best-available error message, without the service prefix
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
        payload: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ExternalAPIError.

        Args:
            service: Name of the external service
            message: Error message
            status_code: HTTP status code (optional)
            endpoint: API endpoint (optional)
            payload: Response body for debugging (optional)
            context: Additional context
        """
        ctx = context or {}
        ctx["service"] = service
        if status_code is not None:
            ctx["status_code"] = status_code
        if endpoint:
            ctx["endpoint"] = endpoint
        if payload is not None:
            ctx["response_body"] = str(payload)[:500]  # Truncate long responses

        self.service = service
        self.status_code = status_code
        self.endpoint = endpoint
        self.payload = payload
        self.reason = message

        super().__init__(f"{service} API error: {message}", service_name=service, context=ctx)


# ============================================
# Upload Errors
# ============================================


class UploadError(RelayError):
    """Base exception for upload-related errors."""

    def __init__(
        self,
        message: str,
        channel: str | None = None,
        platform: str = "tiktok",
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize UploadError.

        Args:
            message: Error message
            channel: Channel the upload was requested for
            platform: Upload platform
            context: Additional context
        """
        ctx = context or {}
        if channel:
            ctx["channel"] = channel
        ctx["platform"] = platform
        super().__init__(message, context=ctx)


class UpstreamCallFailure(UploadError):
    """Raised when any step of the upload sequence fails.

    This is the only request-level failure. Whatever went wrong (platform
    error, bad response, transport error, timeout) is reported the same way.

    Attributes:
        step: Upload step that produced the failure
        message: Best-available error message
        details: Raw upstream payload, if any
    """

    def __init__(
        self,
        step: str,
        message: str,
        details: Any = None,
        channel: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize UpstreamCallFailure.

        Args:
            step: Upload step that produced the failure
            message: Best-available error message
            details: Raw upstream payload (optional)
            channel: Channel the upload was requested for
            context: Additional context
        """
        ctx = context or {}
        ctx["step"] = step

        self.step = step
        self.message = message
        self.details = details

        super().__init__(message, channel=channel, context=ctx)


__all__ = [
    "RelayError",
    "ConfigError",
    "ConfigNotFoundError",
    "ServiceError",
    "ExternalAPIError",
    "UploadError",
    "UpstreamCallFailure",
]
