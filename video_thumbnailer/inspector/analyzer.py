"""
Media inspection using FFprobe.

Thumbnail scheduling needs the media duration; this module reads it (plus
the primary video stream's size and codec) from ffprobe's JSON output.
"""

import json
from pathlib import Path
from typing import Optional

from ..executor import AsyncFFmpegProcess
from ..models import MediaInfo
from ..utils import FFmpegError, MediaInspectionError, ProcessTimeoutError, get_logger

logger = get_logger(__name__)


class MediaInspector:
    """Inspects media files using FFprobe."""

    def __init__(self, ffprobe_path: str = "ffprobe", timeout: Optional[float] = 30.0):
        """
        Initialize media inspector.

        Args:
            ffprobe_path: Path to ffprobe executable (default: "ffprobe")
            timeout: Maximum probe time in seconds
        """
        self._ffprobe_path = ffprobe_path
        self._timeout = timeout

    async def inspect(self, input_file: Path) -> MediaInfo:
        """
        Inspect media file.

        Args:
            input_file: Path to media file to inspect

        Returns:
            MediaInfo for the file

        Raises:
            MediaInspectionError: If file doesn't exist or inspection fails
        """
        if not input_file.exists():
            raise MediaInspectionError(f"File not found: {input_file}")

        if not input_file.is_file():
            raise MediaInspectionError(f"Not a file: {input_file}")

        logger.info(f"Inspecting media file: {input_file.name}")

        probe_data = await self._run_ffprobe(input_file)
        return self._parse(input_file, probe_data)

    async def _run_ffprobe(self, input_file: Path) -> dict:
        """
        Run ffprobe and return parsed JSON output.

        Raises:
            MediaInspectionError: If ffprobe fails
        """
        command = [
            self._ffprobe_path,
            "-v",
            "quiet",
            "-print_format",
            "json",
            "-show_format",
            "-show_streams",
            str(input_file),
        ]

        try:
            stdout, _ = await AsyncFFmpegProcess(command, timeout=self._timeout).run()
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise MediaInspectionError(f"Failed to parse FFprobe output: {e}") from e
        except (FFmpegError, ProcessTimeoutError) as e:
            raise MediaInspectionError(f"FFprobe execution failed: {e}") from e

        if not isinstance(data, dict):
            raise MediaInspectionError(
                f"Unexpected FFprobe output for {input_file.name}: expected a JSON object"
            )
        return data

    def _parse(self, input_file: Path, probe_data: dict) -> MediaInfo:
        format_data = probe_data.get("format", {})
        video_stream = next(
            (
                stream
                for stream in probe_data.get("streams", [])
                if stream.get("codec_type", "").lower() == "video"
                and not stream.get("disposition", {}).get("attached_pic", 0)
            ),
            None,
        )

        try:
            duration = float(format_data.get("duration") or 0.0)
            if duration <= 0.0 and video_stream is not None:
                duration = float(video_stream.get("duration") or 0.0)
            size = int(format_data.get("size") or 0)
        except (TypeError, ValueError) as e:
            raise MediaInspectionError(f"Malformed FFprobe format data: {e}") from e

        if video_stream is None:
            logger.warning(f"No video stream found in {input_file.name}")

        media_info = MediaInfo(
            path=input_file,
            format_name=format_data.get("format_name", ""),
            duration=duration,
            size=size,
            width=video_stream.get("width") if video_stream else None,
            height=video_stream.get("height") if video_stream else None,
            video_codec=video_stream.get("codec_name") if video_stream else None,
        )

        logger.debug(
            f"Probed {input_file.name}: {media_info.duration:.3f}s, "
            f"{media_info.resolution}, codec={media_info.video_codec}"
        )
        return media_info
