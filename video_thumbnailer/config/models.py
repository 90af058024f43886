"""
Configuration models using Pydantic.

This module defines the configuration structure for the video thumbnailer.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class FFmpegConfig(BaseModel):
    """External tool configuration."""

    ffmpeg_path: str = Field(default="ffmpeg", description="FFmpeg executable name or path")
    ffprobe_path: str = Field(default="ffprobe", description="FFprobe executable name or path")
    timeout: Optional[float] = Field(
        default=30.0, gt=0, description="Per-frame extraction timeout in seconds (None = no limit)"
    )

    @field_validator("ffmpeg_path", "ffprobe_path")
    @classmethod
    def validate_executable(cls, v: str) -> str:
        """Reject blank executable names."""
        if not v.strip():
            raise ValueError("executable path must not be empty")
        return v.strip()


class ThumbnailConfig(BaseModel):
    """Thumbnail generation defaults."""

    trim_quality: int = Field(default=10, ge=0, le=100, description="Trim bar thumbnail quality")
    cover_quality: int = Field(default=10, ge=0, le=100, description="Cover thumbnail quality")
    trim_quantity: int = Field(default=10, ge=1, le=200, description="Trim bar thumbnail count")
    cover_quantity: int = Field(default=5, ge=1, le=200, description="Cover candidate count")
    max_concurrency: int = Field(
        default=1, ge=1, le=16, description="Concurrent extractions per batch (1 = sequential)"
    )
    scratch_dir: Optional[Path] = Field(
        default=None, description="Scratch directory (default: system temporary directory)"
    )


class ThumbnailerConfig(BaseModel):
    """Main thumbnailer configuration."""

    ffmpeg: FFmpegConfig = Field(default_factory=FFmpegConfig)
    thumbnails: ThumbnailConfig = Field(default_factory=ThumbnailConfig)

    @classmethod
    def create_default(cls) -> "ThumbnailerConfig":
        """Create default configuration."""
        return cls()
