"""
Data models for frame extraction requests and results.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

MIN_QUALITY_HINT = 0
MAX_QUALITY_HINT = 100
MAX_NATIVE_QUALITY = 10


def to_native_quality(quality: int) -> int:
    """
    Map a 0-100 quality hint onto the value passed to ffmpeg's ``-q:v``.

    ``floor(quality / 10) + 1`` with the hint clamped to [0, 100] and the
    result capped at 10: 0-9 -> 1, 10-19 -> 2, ..., 90-100 -> 10. Lower
    ``-q:v`` values produce larger, higher fidelity JPEGs.

    Args:
        quality: Quality hint on the 0-100 scale

    Returns:
        Native quality in [1, 10]
    """
    clamped = max(MIN_QUALITY_HINT, min(MAX_QUALITY_HINT, int(quality)))
    return min(clamped // 10 + 1, MAX_NATIVE_QUALITY)


@dataclass(frozen=True)
class ExtractionRequest:
    """A single frame to pull out of a source video."""

    source_path: Path
    time_ms: int
    quality: int

    @property
    def seek_seconds(self) -> float:
        """Seek offset in seconds."""
        return self.time_ms / 1000.0

    @property
    def native_quality(self) -> int:
        """Quality in ffmpeg's ``-q:v`` scale."""
        return to_native_quality(self.quality)


@dataclass
class CoverData:
    """Cover candidate: encoded image bytes paired with their timestamp."""

    thumb_data: Optional[bytes]
    time_ms: int

    @property
    def has_image(self) -> bool:
        """Check if extraction produced an image."""
        return self.thumb_data is not None
