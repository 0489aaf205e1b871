"""Unit tests for chunk planning."""

import pytest

from tiktok_relay.config.upload import MIB
from tiktok_relay.services.uploader.chunking import (
    ChunkWindow,
    chunk_count,
    content_range,
    plan_chunks,
)


@pytest.mark.unit
class TestChunkCount:
    """Tests for chunk_count."""

    @pytest.mark.parametrize(
        ("video_size", "chunk_size", "expected"),
        [
            (1, 10, 1),
            (10, 10, 1),
            (11, 10, 2),
            (20, 10, 2),
            (21, 10, 3),
            (25 * MIB, 10 * MIB, 3),
        ],
    )
    def test_ceil_division(self, video_size, chunk_size, expected):
        """Test ceil(N / C) around chunk boundaries."""
        assert chunk_count(video_size, chunk_size) == expected

    @pytest.mark.parametrize(("video_size", "chunk_size"), [(0, 10), (-1, 10), (10, 0)])
    def test_non_positive_sizes_rejected(self, video_size, chunk_size):
        """Test empty videos and zero chunk sizes are refused."""
        with pytest.raises(ValueError):
            chunk_count(video_size, chunk_size)


@pytest.mark.unit
class TestPlanChunks:
    """Tests for plan_chunks and ChunkPlan.windows."""

    @pytest.mark.parametrize(
        ("video_size", "chunk_size"),
        [(1, 1), (7, 3), (9, 3), (1000, 1), (25 * MIB, 10 * MIB), (3, 10)],
    )
    def test_windows_partition_video(self, video_size, chunk_size):
        """Test windows are contiguous, non-overlapping and cover [0, N)."""
        plan = plan_chunks(video_size, chunk_size)
        windows = list(plan.windows())

        assert len(windows) == plan.total_chunk_count
        assert windows[0].start == 0
        assert windows[-1].end == video_size
        for previous, current in zip(windows, windows[1:], strict=False):
            assert current.start == previous.end
        assert sum(w.length for w in windows) == video_size
        assert all(w.length == chunk_size for w in windows[:-1])
        assert 0 < windows[-1].length <= chunk_size

    def test_scenario_25mib(self):
        """Test the 25 MiB / 10 MiB plan."""
        plan = plan_chunks(25 * MIB, 10 * MIB)

        assert [(w.start, w.end) for w in plan.windows()] == [
            (0, 10485760),
            (10485760, 20971520),
            (20971520, 26214400),
        ]

    def test_indices_ascending(self):
        """Test window indices follow upload order."""
        assert [w.index for w in plan_chunks(30, 10).windows()] == [0, 1, 2]


@pytest.mark.unit
class TestContentRange:
    """Tests for Content-Range formatting."""

    def test_inclusive_end(self):
        """Test the header uses an inclusive last byte."""
        assert content_range(0, 10485760, 26214400) == "bytes 0-10485759/26214400"

    def test_single_byte(self):
        """Test a one-byte window."""
        assert content_range(0, 1, 1) == "bytes 0-0/1"

    def test_window_property(self):
        """Test ChunkWindow formats its own range."""
        window = ChunkWindow(index=2, start=20971520, end=26214400, total=26214400)

        assert window.length == 5 * MIB
        assert window.content_range == "bytes 20971520-26214399/26214400"
