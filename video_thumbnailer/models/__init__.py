"""Data models for the video thumbnailer."""

from video_thumbnailer.models.editor import DEFAULT_THUMBNAIL_QUALITY, VideoEditorState
from video_thumbnailer.models.media import MediaInfo
from video_thumbnailer.models.thumbnails import (
    CoverData,
    ExtractionRequest,
    to_native_quality,
)

__all__ = [
    # Editor state
    "DEFAULT_THUMBNAIL_QUALITY",
    "VideoEditorState",
    # Media models
    "MediaInfo",
    # Extraction models
    "CoverData",
    "ExtractionRequest",
    "to_native_quality",
]
