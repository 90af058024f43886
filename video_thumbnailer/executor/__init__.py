"""Process execution and task scheduling."""

from video_thumbnailer.executor.parallel import ExecutionResult, OrderedExecutor
from video_thumbnailer.executor.subprocess import (
    AsyncFFmpegProcess,
    FFmpegCommandBuilder,
    build_frame_command,
)

__all__ = [
    "AsyncFFmpegProcess",
    "ExecutionResult",
    "FFmpegCommandBuilder",
    "OrderedExecutor",
    "build_frame_command",
]
