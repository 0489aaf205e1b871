"""Chunk planning for range-addressed uploads.

A video of N bytes split by chunk size C yields ceil(N / C) contiguous,
non-overlapping half-open windows covering exactly [0, N). Only the last
window may be shorter than C.
"""

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class ChunkWindow:
    """One byte window ``[start, end)`` of the video.

    Attributes:
        index: Zero-based chunk index
        start: Offset of the first byte
        end: Offset one past the last byte
        total: Total video length in bytes
    """

    index: int
    start: int
    end: int
    total: int

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def content_range(self) -> str:
        """Content-Range header value for this window."""
        return content_range(self.start, self.end, self.total)


@dataclass(frozen=True)
class ChunkPlan:
    """How a video of ``video_size`` bytes is split into chunks.

    Attributes:
        video_size: Total video length in bytes
        chunk_size: Window length in bytes
        total_chunk_count: Number of windows
    """

    video_size: int
    chunk_size: int
    total_chunk_count: int

    def windows(self) -> Iterator[ChunkWindow]:
        """Yield windows in ascending order."""
        for index in range(self.total_chunk_count):
            start = index * self.chunk_size
            end = min(start + self.chunk_size, self.video_size)
            yield ChunkWindow(index=index, start=start, end=end, total=self.video_size)


def chunk_count(video_size: int, chunk_size: int) -> int:
    """Return ceil(video_size / chunk_size).

    Raises:
        ValueError: If either size is not positive
    """
    if video_size <= 0:
        raise ValueError(f"video_size must be positive, got {video_size}")
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    return -(-video_size // chunk_size)


def plan_chunks(video_size: int, chunk_size: int) -> ChunkPlan:
    """Build the chunk plan for a video.

    Args:
        video_size: Total video length in bytes
        chunk_size: Window length in bytes

    Returns:
        ChunkPlan with the derived chunk count

    Raises:
        ValueError: If either size is not positive
    """
    return ChunkPlan(
        video_size=video_size,
        chunk_size=chunk_size,
        total_chunk_count=chunk_count(video_size, chunk_size),
    )


def content_range(start: int, end: int, total: int) -> str:
    """Format ``bytes {start}-{end-1}/{total}`` for the half-open window [start, end)."""
    return f"bytes {start}-{end - 1}/{total}"


__all__ = ["ChunkPlan", "ChunkWindow", "chunk_count", "content_range", "plan_chunks"]
