"""Shared utilities: errors, logging and helpers."""

from video_thumbnailer.utils.errors import (
    ConfigurationError,
    ExtractionError,
    FFmpegError,
    MediaInspectionError,
    ProcessTimeoutError,
    ThumbnailerError,
)
from video_thumbnailer.utils.helpers import (
    ensure_directory,
    format_size,
    format_timestamp_ms,
)
from video_thumbnailer.utils.logger import get_logger, setup_logger

__all__ = [
    # Errors
    "ConfigurationError",
    "ExtractionError",
    "FFmpegError",
    "MediaInspectionError",
    "ProcessTimeoutError",
    "ThumbnailerError",
    # Helpers
    "ensure_directory",
    "format_size",
    "format_timestamp_ms",
    # Logging
    "get_logger",
    "setup_logger",
]
