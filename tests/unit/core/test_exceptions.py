"""Tests for tiktok_relay.core.exceptions module."""

import pytest

from tiktok_relay.core.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    ExternalAPIError,
    RelayError,
    ServiceError,
    UploadError,
    UpstreamCallFailure,
)


@pytest.mark.unit
def test_relay_error():
    """Test base RelayError exception."""
    error = RelayError("Test error")
    assert str(error) == "Test error"
    assert error.context == {}
    assert isinstance(error, Exception)


@pytest.mark.unit
def test_relay_error_to_dict():
    """Test serialization for structured logging."""
    error = RelayError("Test error", context={"a": 1, "b": 2})

    assert error.context == {"a": 1, "b": 2}
    assert error.to_dict() == {
        "error_type": "RelayError",
        "message": "Test error",
        "context": {"a": 1, "b": 2},
    }


@pytest.mark.unit
def test_config_error_records_key():
    """Test ConfigError stores the setting name."""
    error = ConfigError("bad value", config_key="PORT")

    assert error.context["config_key"] == "PORT"
    assert isinstance(error, RelayError)


@pytest.mark.unit
def test_config_not_found_error_lists_missing():
    """Test ConfigNotFoundError names every missing variable."""
    error = ConfigNotFoundError(["TIKTOK_CLIENT_KEY", "TIKTOK_REFRESH_TOKEN"])

    assert error.missing == ["TIKTOK_CLIENT_KEY", "TIKTOK_REFRESH_TOKEN"]
    assert str(error) == (
        "Required configuration not set: TIKTOK_CLIENT_KEY, TIKTOK_REFRESH_TOKEN"
    )
    assert error.context["missing"] == ["TIKTOK_CLIENT_KEY", "TIKTOK_REFRESH_TOKEN"]
    assert isinstance(error, ConfigError)


@pytest.mark.unit
def test_external_api_error():
    """Test ExternalAPIError keeps the raw reason and payload."""
    payload = {"error": {"code": "access_token_invalid", "message": "Token expired"}}
    error = ExternalAPIError(
        service="TikTok",
        message="Token expired",
        status_code=401,
        endpoint="/v2/oauth/token/",
        payload=payload,
    )

    assert str(error) == "TikTok API error: Token expired"
    assert error.reason == "Token expired"
    assert error.payload is payload
    assert error.status_code == 401
    assert error.context["endpoint"] == "/v2/oauth/token/"
    assert error.context["service_name"] == "TikTok"
    assert isinstance(error, ServiceError)


@pytest.mark.unit
def test_external_api_error_truncates_logged_body():
    """Test the context copy of the body is truncated."""
    error = ExternalAPIError(service="TikTok", message="boom", payload="x" * 2000)

    assert len(error.context["response_body"]) == 500
    assert len(error.payload) == 2000


@pytest.mark.unit
def test_upload_error_defaults_platform():
    """Test UploadError tags the platform."""
    error = UploadError("failed", channel="daily-news")

    assert error.context == {"channel": "daily-news", "platform": "tiktok"}


@pytest.mark.unit
def test_upstream_call_failure():
    """Test UpstreamCallFailure carries step, message and details."""
    error = UpstreamCallFailure(
        step="transferring",
        message="HTTP 500",
        details={"raw": True},
        channel="daily-news",
    )

    assert error.step == "transferring"
    assert error.message == "HTTP 500"
    assert error.details == {"raw": True}
    assert str(error) == "HTTP 500"
    assert error.context["step"] == "transferring"
    assert isinstance(error, UploadError)
