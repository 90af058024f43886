"""
Helper functions for the video thumbnailer.

This module contains utility functions used throughout the application.
"""

from pathlib import Path


def format_size(bytes: int) -> str:
    """
    Format file size in human-readable format.

    Args:
        bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 KB")
    """
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if bytes < 1024.0:
            return f"{bytes:.1f} {unit}"
        bytes /= 1024.0  # type: ignore
    return f"{bytes:.1f} PB"


def format_timestamp_ms(time_ms: int) -> str:
    """
    Format a millisecond offset as HH:MM:SS.mmm.

    Args:
        time_ms: Offset in milliseconds

    Returns:
        Formatted timestamp (e.g., "00:01:05.250")
    """
    hours, remainder = divmod(int(time_ms), 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    seconds, millis = divmod(remainder, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"


def ensure_directory(path: Path) -> Path:
    """
    Ensure directory exists, create if necessary.

    Args:
        path: Directory path

    Returns:
        Path object
    """
    path.mkdir(parents=True, exist_ok=True)
    return path
