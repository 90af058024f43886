"""
Video Thumbnailer

Trim bar thumbnails and cover frame candidates for video editors, extracted
progressively with ffmpeg.
"""

__version__ = "0.1.0"

from video_thumbnailer.models import CoverData, ExtractionRequest, MediaInfo, VideoEditorState
from video_thumbnailer.thumbnails import (
    FFmpegFrameExtractor,
    FrameExtractor,
    ThumbnailGenerator,
    generate_cover_thumbnails,
    generate_single_cover_thumbnail,
    generate_trim_thumbnails,
)
from video_thumbnailer.utils import (
    ConfigurationError,
    ThumbnailerError,
    get_logger,
    setup_logger,
)

__all__ = [
    "__version__",
    # Models
    "CoverData",
    "ExtractionRequest",
    "MediaInfo",
    "VideoEditorState",
    # Thumbnails
    "FFmpegFrameExtractor",
    "FrameExtractor",
    "ThumbnailGenerator",
    "generate_cover_thumbnails",
    "generate_single_cover_thumbnail",
    "generate_trim_thumbnails",
    # Utils
    "ConfigurationError",
    "ThumbnailerError",
    "get_logger",
    "setup_logger",
]
