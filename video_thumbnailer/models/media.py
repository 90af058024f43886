"""
Data models for media file information.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class MediaInfo:
    """Container and primary video stream details reported by ffprobe."""

    path: Path
    format_name: str
    duration: float  # seconds
    size: int
    width: Optional[int] = None
    height: Optional[int] = None
    video_codec: Optional[str] = None

    @property
    def duration_ms(self) -> int:
        """Duration in whole milliseconds."""
        return int(round(self.duration * 1000))

    @property
    def has_video(self) -> bool:
        """Check if a video stream was found."""
        return self.video_codec is not None

    @property
    def resolution(self) -> str:
        """Get resolution as string (e.g., '1920x1080')."""
        if self.width is None or self.height is None:
            return "unknown"
        return f"{self.width}x{self.height}"
