"""Media inspection."""

from video_thumbnailer.inspector.analyzer import MediaInspector

__all__ = [
    "MediaInspector",
]
