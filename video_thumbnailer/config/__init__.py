"""Configuration management for the video thumbnailer."""

from video_thumbnailer.config.manager import (
    ConfigManager,
    get_config,
    get_config_manager,
)
from video_thumbnailer.config.models import (
    FFmpegConfig,
    ThumbnailConfig,
    ThumbnailerConfig,
)

__all__ = [
    # Manager
    "ConfigManager",
    "get_config",
    "get_config_manager",
    # Models
    "FFmpegConfig",
    "ThumbnailConfig",
    "ThumbnailerConfig",
]
