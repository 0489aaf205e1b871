"""FastAPI application entry point.

This module creates and configures the FastAPI application instance.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tiktok_relay.core.config import APP_VERSION, get_config
from tiktok_relay.core.container import get_container, get_upload_orchestrator
from tiktok_relay.core.exceptions import RelayError
from tiktok_relay.core.logging import get_logger, setup_logging
from tiktok_relay.models.upload import UploadRequest
from tiktok_relay.services.uploader.orchestrator import UploadOrchestrator

# Setup logging
setup_logging()
logger = get_logger(__name__)


def failure_envelope(error: str, details: Any = None) -> dict[str, Any]:
    """Uniform failure body."""
    return {"success": False, "error": error, "details": details}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events.

    Refuses to start without TikTok credentials, and closes the shared
    HTTP client on shutdown.

    Args:
        app: FastAPI application instance

    Yields:
        None
    """
    container = get_container()
    config = container.config()

    try:
        config.require_credentials()
    except RelayError as e:
        logger.error("Missing configuration, refusing to start", **e.context)
        raise

    orchestrator = container.upload_orchestrator()
    logger.info(
        "TikTok Upload Service running",
        port=config.port,
        mode=orchestrator.mode.value,
        endpoint="POST /upload",
    )

    yield

    logger.info("Shutting down TikTok Upload Service")
    await container.http_client().close()
    logger.info("Cleanup complete")


# Create FastAPI application
_config = get_config()
app = FastAPI(
    title=_config.app_name,
    description="Relay videos from a URL to TikTok",
    version=APP_VERSION,
    docs_url="/docs" if _config.is_development else None,
    redoc_url="/redoc" if _config.is_development else None,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject malformed upload bodies before any outbound call."""
    details = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    logger.warning("Invalid request body", path=request.url.path, errors=details)
    return JSONResponse(
        status_code=400,
        content=failure_envelope("Invalid request body", details),
    )


@app.exception_handler(RelayError)
async def relay_exception_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Map relay errors raised outside the orchestrator (e.g. missing config)."""
    logger.error("Request failed", path=request.url.path, **exc.to_dict())
    return JSONResponse(status_code=500, content=failure_envelope(str(exc), exc.context))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler so every failure keeps the envelope shape."""
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content=failure_envelope(str(exc) or exc.__class__.__name__),
    )


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint.

    Returns:
        Service status, version and current time
    """
    return {
        "status": "TikTok Upload Service Running",
        "version": APP_VERSION,
        "timestamp": datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace(
            "+00:00", "Z"
        ),
    }


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        Health status
    """
    cfg = get_container().config()
    return {
        "status": "healthy",
        "app": cfg.app_name,
        "env": cfg.app_env,
        "mode": cfg.upload_mode.value,
    }


@app.post("/upload")
async def upload(
    body: UploadRequest,
    orchestrator: UploadOrchestrator = Depends(get_upload_orchestrator),
) -> JSONResponse:
    """Relay one video to TikTok.

    Returns:
        200 with the success envelope, 500 with the failure envelope
    """
    result = await orchestrator.handle_upload(body)
    return JSONResponse(
        status_code=200 if result.success else 500,
        content=result.to_response(),
    )


def run() -> None:
    """Run the service with uvicorn on the configured host and port."""
    config = get_config()
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    run()
