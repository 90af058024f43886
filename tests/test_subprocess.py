"""
Tests for async subprocess wrapper and command building.
"""

import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from video_thumbnailer.executor import (
    AsyncFFmpegProcess,
    FFmpegCommandBuilder,
    build_frame_command,
)
from video_thumbnailer.utils import FFmpegError, ProcessTimeoutError


def python_command(code: str) -> list[str]:
    """Run a snippet with the current interpreter."""
    return [sys.executable, "-c", code]


class TestAsyncFFmpegProcess:
    """Test AsyncFFmpegProcess class."""

    def test_initialization(self):
        """Test process initialization."""
        process = AsyncFFmpegProcess(["ffmpeg", "-version"])
        assert process.command == ["ffmpeg", "-version"]
        assert process.timeout is None
        assert process._process is None

    @pytest.mark.asyncio
    async def test_run_success(self):
        """Test successful command execution."""
        process = AsyncFFmpegProcess(
            python_command(
                "import sys; sys.stdout.write('out'); sys.stderr.write('line one\\n\\nline two\\n')"
            )
        )

        stdout, stderr = await process.run()

        assert stdout == "out"
        assert stderr == "line one\nline two"
        assert process._process.returncode == 0

    @pytest.mark.asyncio
    async def test_run_failure_raises_ffmpeg_error(self):
        """Test non-zero exit raises FFmpegError with stderr."""
        process = AsyncFFmpegProcess(
            python_command(
                "import sys; "
                "sys.stderr.write('banner\\nclip.mp4: Invalid data found when processing input\\n'); "
                "sys.exit(3)"
            )
        )

        with pytest.raises(FFmpegError) as exc_info:
            await process.run()

        error = exc_info.value
        assert error.returncode == 3
        assert "Invalid data found" in str(error)
        assert "banner" in error.stderr
        assert error.command == process.command

    @pytest.mark.asyncio
    async def test_run_timeout(self):
        """Test timeout terminates the process."""
        process = AsyncFFmpegProcess(python_command("import time; time.sleep(30)"), timeout=0.5)

        with pytest.raises(ProcessTimeoutError) as exc_info:
            await process.run()

        assert exc_info.value.timeout == 0.5
        assert process._process.returncode is not None

    @pytest.mark.asyncio
    async def test_missing_executable(self, tmp_path):
        """Test spawn failure is reported as FFmpegError."""
        process = AsyncFFmpegProcess([str(tmp_path / "no-such-ffmpeg"), "-version"])

        with pytest.raises(FFmpegError, match="Failed to start"):
            await process.run()

    @pytest.mark.asyncio
    async def test_cancellation_terminates_process(self):
        """Test cancelling the awaiting task stops the child."""
        process = AsyncFFmpegProcess(python_command("import time; time.sleep(30)"))
        task = asyncio.create_task(process.run())

        for _ in range(100):
            if process._process is not None:
                break
            await asyncio.sleep(0.05)
        assert process._process is not None
        assert process._process.returncode is None

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert process._process.returncode is not None

    @pytest.mark.asyncio
    async def test_terminate_without_process(self):
        """Test terminate is a no-op before run."""
        process = AsyncFFmpegProcess(["ffmpeg"])
        await process.terminate()
        assert process._process is None

    @pytest.mark.asyncio
    async def test_terminate_kills_after_grace_period(self):
        """Test SIGKILL when the process ignores SIGTERM."""
        mock_process = MagicMock()
        mock_process.returncode = None
        mock_process.wait = AsyncMock()

        process = AsyncFFmpegProcess(["ffmpeg"])
        process._process = mock_process

        with patch("asyncio.wait_for", side_effect=asyncio.TimeoutError):
            await process.terminate()

        mock_process.terminate.assert_called_once()
        mock_process.kill.assert_called_once()

    def test_extract_error_message_pattern(self):
        """Test known error lines are surfaced with context."""
        process = AsyncFFmpegProcess(["ffmpeg"])
        stderr = "header\nin.mp4: No such file or directory\nnext\nmore\nignored"

        message = process._extract_error_message(stderr)

        assert message == "in.mp4: No such file or directory | next | more"

    def test_extract_error_message_fallback(self):
        """Test fallback to the last lines."""
        process = AsyncFFmpegProcess(["ffmpeg"])

        assert process._extract_error_message("a\nb\n\nc\nd") == "b | c | d"
        assert process._extract_error_message("") == "Unknown error"


class TestFFmpegCommandBuilder:
    """Test FFmpegCommandBuilder."""

    def test_input_options_precede_input(self):
        """Test input options are placed before -i."""
        command = (
            FFmpegCommandBuilder()
            .input(Path("in.mp4"), {"ss": "1.5"})
            .output(Path("out.jpg"), {"vframes": "1"})
            .build()
        )

        assert command == [
            "ffmpeg",
            "-hide_banner",
            "-ss",
            "1.5",
            "-i",
            "in.mp4",
            "-vframes",
            "1",
            "out.jpg",
        ]

    def test_flags(self):
        """Test empty option values become bare flags."""
        command = (
            FFmpegCommandBuilder("/opt/ffmpeg")
            .input(Path("in.mp4"))
            .output(Path("out.jpg"), {"an": "", "y": ""})
            .build()
        )

        assert command == [
            "/opt/ffmpeg",
            "-hide_banner",
            "-i",
            "in.mp4",
            "-an",
            "-y",
            "out.jpg",
        ]


def test_build_frame_command():
    """Test the single frame command layout."""
    command = build_frame_command(
        input_file=Path("/videos/in.mp4"),
        output_file=Path("/tmp/thumbnail_1_2000.jpg"),
        seek_seconds=2.0,
        native_quality=2,
    )

    assert command == [
        "ffmpeg",
        "-hide_banner",
        "-ss",
        "2.0",
        "-i",
        "/videos/in.mp4",
        "-vframes",
        "1",
        "-q:v",
        "2",
        "-an",
        "-y",
        "/tmp/thumbnail_1_2000.jpg",
    ]
