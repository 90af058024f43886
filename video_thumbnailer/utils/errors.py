"""
Custom exceptions for the video thumbnailer.

This module defines the exception hierarchy used throughout the application.
"""


class ThumbnailerError(Exception):
    """Base exception for all thumbnailer errors."""

    pass


class MediaInspectionError(ThumbnailerError):
    """Failed to inspect media file."""

    pass


class ConfigurationError(ThumbnailerError):
    """Configuration is invalid or missing."""

    pass


class ExtractionError(ThumbnailerError):
    """No usable frame could be extracted."""

    pass


class FFmpegError(ThumbnailerError):
    """FFmpeg command execution failed."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        stderr: str | None = None,
        returncode: int | None = None,
    ):
        """
        Initialize FFmpeg error with command details.

        Args:
            message: Error message
            command: FFmpeg command that failed
            stderr: Standard error output from FFmpeg
            returncode: Exit code reported by the process
        """
        super().__init__(message)
        self.command = command
        self.stderr = stderr
        self.returncode = returncode


class ProcessTimeoutError(ThumbnailerError):
    """Process exceeded timeout threshold."""

    def __init__(self, message: str, timeout: float):
        """
        Initialize timeout error.

        Args:
            message: Error message
            timeout: Timeout value in seconds
        """
        super().__init__(message)
        self.timeout = timeout
