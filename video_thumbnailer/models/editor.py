"""
Editor state consumed by the thumbnail generators.

The editing UI owns this state; the generators only read the source path,
durations, trim window and quality settings from it.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .media import MediaInfo

DEFAULT_THUMBNAIL_QUALITY = 10


@dataclass
class VideoEditorState:
    """
    Snapshot of a video editor's source and trim selection.

    The trim window is stored as fractions of the full duration, the way a
    trim slider reports it: ``min_trim`` and ``max_trim`` in [0, 1].
    """

    file: Path
    video_duration_ms: int
    min_trim: float = 0.0
    max_trim: float = 1.0
    trim_thumbnails_quality: int = DEFAULT_THUMBNAIL_QUALITY
    cover_thumbnails_quality: int = DEFAULT_THUMBNAIL_QUALITY

    def __post_init__(self) -> None:
        self.file = Path(self.file)
        if self.video_duration_ms < 0:
            raise ValueError(f"video_duration_ms must be >= 0, got {self.video_duration_ms}")
        if not 0.0 <= self.min_trim <= self.max_trim <= 1.0:
            raise ValueError(
                f"trim must satisfy 0 <= min_trim <= max_trim <= 1, "
                f"got {self.min_trim}..{self.max_trim}"
            )
        for name in ("trim_thumbnails_quality", "cover_thumbnails_quality"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be between 0 and 100, got {value}")

    @classmethod
    def with_trim_ms(
        cls,
        file: Path,
        video_duration_ms: int,
        start_ms: int = 0,
        end_ms: Optional[int] = None,
        **kwargs,
    ) -> "VideoEditorState":
        """
        Build a state from a trim window given in milliseconds.

        Args:
            file: Source video
            video_duration_ms: Full media duration
            start_ms: Trim start (default: beginning)
            end_ms: Trim end (default: end of media)
            **kwargs: Quality settings

        Returns:
            VideoEditorState
        """
        if end_ms is None:
            end_ms = video_duration_ms
        if not 0 <= start_ms <= end_ms <= video_duration_ms:
            raise ValueError(
                f"trim window {start_ms}..{end_ms} ms is outside 0..{video_duration_ms} ms"
            )
        if video_duration_ms == 0:
            return cls(file=file, video_duration_ms=0, **kwargs)
        return cls(
            file=file,
            video_duration_ms=video_duration_ms,
            min_trim=start_ms / video_duration_ms,
            max_trim=end_ms / video_duration_ms,
            **kwargs,
        )

    @classmethod
    def from_media_info(cls, media_info: MediaInfo, **kwargs) -> "VideoEditorState":
        """Build an untrimmed state for a probed file."""
        return cls(file=media_info.path, video_duration_ms=media_info.duration_ms, **kwargs)

    @property
    def is_trimmed(self) -> bool:
        """Check if the trim window is narrower than the full media."""
        return self.min_trim > 0.0 or self.max_trim < 1.0

    @property
    def start_trim_ms(self) -> int:
        return int(round(self.video_duration_ms * self.min_trim))

    @property
    def end_trim_ms(self) -> int:
        return int(round(self.video_duration_ms * self.max_trim))

    @property
    def trimmed_duration_ms(self) -> int:
        """Length of the selected trim window."""
        return self.end_trim_ms - self.start_trim_ms
