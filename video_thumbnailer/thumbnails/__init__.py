"""
Thumbnail and cover frame extraction for video editing.
"""

from .extractor import (
    FFmpegFrameExtractor,
    FrameExtractor,
    build_output_path,
    get_scratch_directory,
)
from .generator import (
    ThumbnailGenerator,
    generate_cover_thumbnails,
    generate_single_cover_thumbnail,
    generate_trim_thumbnails,
)
from .scheduler import cover_timestamps, cover_timestamps_for, trim_timestamps

__all__ = [
    "FFmpegFrameExtractor",
    "FrameExtractor",
    "ThumbnailGenerator",
    "build_output_path",
    "cover_timestamps",
    "cover_timestamps_for",
    "generate_cover_thumbnails",
    "generate_single_cover_thumbnail",
    "generate_trim_thumbnails",
    "get_scratch_directory",
    "trim_timestamps",
]
