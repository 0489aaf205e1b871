"""Upload orchestration service.

This module provides the UploadOrchestrator, which relays one video from a
remote URL to TikTok:

    authenticate -> fetch -> init session -> transfer -> publish

Steps run strictly in order. The first failure ends the request with a
failure result; nothing is retried and an opened session is abandoned.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from tiktok_relay.config.upload import MIB, TikTokUploadConfig, UploadMode
from tiktok_relay.core.exceptions import ExternalAPIError, UpstreamCallFailure
from tiktok_relay.core.logging import bind_request_context, clear_request_context, get_logger
from tiktok_relay.core.state_machine import StateMachine, create_upload_state_machine
from tiktok_relay.infrastructure.tiktok_api import TikTokAPIClient, build_post_info
from tiktok_relay.infrastructure.tiktok_auth import TikTokAuthClient
from tiktok_relay.infrastructure.video_source import VideoSourceClient
from tiktok_relay.models.upload import (
    AccessToken,
    UploadRequest,
    UploadResult,
    UploadState,
)
from tiktok_relay.services.uploader.chunking import content_range, plan_chunks

logger = get_logger(__name__)


class UploadOrchestrator:
    """Relay a remote video to TikTok.

    One orchestrator serves every request. It holds no per-request state;
    the semaphore only caps how many videos are buffered at once.

    Example:
        >>> orchestrator = UploadOrchestrator(auth_client, api_client, video_source)
        >>> result = await orchestrator.handle_upload(
        ...     UploadRequest(
        ...         video_url="https://cdn.example.com/clip.mp4",
        ...         title="Clip",
        ...         description="",
        ...         channel_name="news",
        ...     )
        ... )
        >>> result.to_response()
    """

    def __init__(
        self,
        auth_client: TikTokAuthClient,
        api_client: TikTokAPIClient,
        video_source: VideoSourceClient,
        config: TikTokUploadConfig | None = None,
    ) -> None:
        """Initialize upload orchestrator.

        Args:
            auth_client: Refresh-token exchange client
            api_client: TikTok Content Posting client
            video_source: Source video downloader
            config: Upload configuration
        """
        self.auth_client = auth_client
        self.api_client = api_client
        self.video_source = video_source
        self.config = config or TikTokUploadConfig()
        self._slots = asyncio.Semaphore(self.config.max_concurrent_uploads)

        logger.info(
            "UploadOrchestrator initialized",
            mode=self.config.transfer.mode.value,
            chunk_size=self.config.transfer.chunk_size,
            max_concurrent_uploads=self.config.max_concurrent_uploads,
        )

    @property
    def mode(self) -> UploadMode:
        return self.config.transfer.mode

    async def handle_upload(self, request: UploadRequest) -> UploadResult:
        """Run the full upload sequence for one request.

        Args:
            request: Validated upload request

        Returns:
            UploadResult; never raises for upstream failures
        """
        bind_request_context(channel=request.channel_name)
        sm = create_upload_state_machine()
        logger.info(
            "Starting TikTok upload",
            title=request.title[:50],
            video_url=request.video_url,
            mode=self.mode.value,
        )

        try:
            async with self._slots:
                video_id, publish_id = await self._run(request, sm)
        except UpstreamCallFailure as e:
            sm.transition(UploadState.FAILED)
            logger.error(
                "Upload failed",
                step=e.step,
                error=e.message,
                details=e.details,
                context=e.context,
            )
            return UploadResult.failed(
                error=e.message,
                details=e.details,
                channel=request.channel_name,
                step=UploadState(e.step),
            )
        finally:
            clear_request_context()

        sm.transition(UploadState.DONE)
        logger.info(
            "Video published",
            channel=request.channel_name,
            video_id=video_id,
            publish_id=publish_id,
        )
        return UploadResult.completed(
            channel=request.channel_name,
            video_id=video_id,
            publish_id=publish_id,
        )

    @asynccontextmanager
    async def _step(self, sm: StateMachine[UploadState], state: UploadState) -> AsyncIterator[None]:
        """Enter ``state`` and convert any failure inside it to UpstreamCallFailure."""
        sm.transition(state)
        try:
            yield
        except ExternalAPIError as e:
            raise UpstreamCallFailure(
                step=state.value,
                message=e.reason,
                details=e.payload,
                context=dict(e.context),
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamCallFailure(
                step=state.value,
                message=str(e) or e.__class__.__name__,
                context={"transport_error": e.__class__.__name__},
            ) from e

    async def _run(
        self, request: UploadRequest, sm: StateMachine[UploadState]
    ) -> tuple[str, str]:
        async with self._step(sm, UploadState.AUTHENTICATING):
            token = await self.auth_client.fetch_access_token()
        logger.info("Access token obtained")

        async with self._step(sm, UploadState.FETCHING):
            video = await self.video_source.fetch(request.video_url)
        logger.info(
            "Video downloaded",
            size_bytes=len(video),
            size_mb=round(len(video) / MIB, 2),
        )

        post_info = build_post_info(request.title, request.description, self.config.post_info)

        if self.mode is UploadMode.SINGLE_SHOT:
            return await self._upload_single_shot(sm, token, video, post_info)
        return await self._upload_chunked(sm, token, video, post_info)

    async def _upload_single_shot(
        self,
        sm: StateMachine[UploadState],
        token: AccessToken,
        video: bytes,
        post_info: dict,
    ) -> tuple[str, str]:
        size = len(video)

        async with self._step(sm, UploadState.SESSION_INIT):
            session = await self.api_client.init_direct_post(token, post_info, size)
        logger.info("Upload session initialized", publish_id=session.publish_id)

        async with self._step(sm, UploadState.TRANSFERRING):
            await self.api_client.put_bytes(
                session.upload_url,
                video,
                content_range(0, size, size),
                timeout=self.config.transfer.single_upload_timeout,
            )
        logger.info("Video uploaded", size_bytes=size)

        # The direct-post init already published the video
        return session.publish_id, session.publish_id

    async def _upload_chunked(
        self,
        sm: StateMachine[UploadState],
        token: AccessToken,
        video: bytes,
        post_info: dict,
    ) -> tuple[str, str]:
        plan = plan_chunks(len(video), self.config.transfer.chunk_size)
        logger.info(
            "Chunk plan",
            video_size=plan.video_size,
            chunk_size=plan.chunk_size,
            total_chunks=plan.total_chunk_count,
        )

        async with self._step(sm, UploadState.SESSION_INIT):
            session = await self.api_client.init_inbox_upload(
                token,
                video_size=plan.video_size,
                chunk_size=plan.chunk_size,
                total_chunk_count=plan.total_chunk_count,
            )
        logger.info("Upload session initialized", publish_id=session.publish_id)

        async with self._step(sm, UploadState.TRANSFERRING):
            for window in plan.windows():
                logger.info(
                    "Uploading chunk",
                    chunk=f"{window.index + 1}/{plan.total_chunk_count}",
                    size_bytes=window.length,
                )
                await self.api_client.put_bytes(
                    session.upload_url,
                    video[window.start : window.end],
                    window.content_range,
                    timeout=self.config.transfer.chunk_upload_timeout,
                )
        logger.info("All chunks uploaded", total_chunks=plan.total_chunk_count)

        async with self._step(sm, UploadState.PUBLISHING):
            video_id = await self.api_client.publish(token, post_info, session)

        return video_id, session.publish_id


__all__ = ["UploadOrchestrator"]
