"""
Single-frame extraction through ffmpeg.

Each extraction writes one JPEG into a scratch directory, reads it back and
removes it. Every failure resolves to ``None`` plus a log record; the scratch
file is removed on every exit path, cancellation included.
"""

import tempfile
import time
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from ..config import ThumbnailerConfig
from ..executor import AsyncFFmpegProcess, build_frame_command
from ..models import ExtractionRequest
from ..utils import FFmpegError, ProcessTimeoutError, get_logger

logger = get_logger(__name__)

OUTPUT_PREFIX = "thumbnail"
OUTPUT_SUFFIX = ".jpg"


@runtime_checkable
class FrameExtractor(Protocol):
    """Anything able to turn (video, offset, quality) into encoded image bytes."""

    async def extract(
        self, source_path: Path, time_ms: int, quality: int, scratch_dir: Path
    ) -> Optional[bytes]: ...


def get_scratch_directory(override: Optional[Path] = None) -> Path:
    """
    Resolve the directory extraction output is written to.

    Args:
        override: Configured directory; created if missing

    Returns:
        ``override`` or the platform temporary directory
    """
    if override is not None:
        override.mkdir(parents=True, exist_ok=True)
        return override
    return Path(tempfile.gettempdir())


def build_output_path(scratch_dir: Path, time_ms: int) -> Path:
    """
    Build ``thumbnail_<epochMillis>_<time_ms>.jpg`` inside ``scratch_dir``.

    Args:
        scratch_dir: Directory for the temporary image
        time_ms: Requested offset, keeps names distinct within one millisecond

    Returns:
        Output file path
    """
    epoch_ms = time.time_ns() // 1_000_000
    return scratch_dir / f"{OUTPUT_PREFIX}_{epoch_ms}_{time_ms}{OUTPUT_SUFFIX}"


class FFmpegFrameExtractor:
    """Extracts single frames by running ffmpeg once per timestamp."""

    def __init__(self, ffmpeg_path: str = "ffmpeg", timeout: Optional[float] = 30.0):
        """
        Initialize extractor.

        Args:
            ffmpeg_path: FFmpeg executable name or path
            timeout: Maximum time per extraction in seconds (None = no limit)
        """
        self.ffmpeg_path = ffmpeg_path
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ThumbnailerConfig) -> "FFmpegFrameExtractor":
        """Create an extractor from the ``ffmpeg`` configuration section."""
        return cls(ffmpeg_path=config.ffmpeg.ffmpeg_path, timeout=config.ffmpeg.timeout)

    async def extract(
        self, source_path: Path, time_ms: int, quality: int, scratch_dir: Path
    ) -> Optional[bytes]:
        """
        Extract the frame at ``time_ms`` as JPEG bytes.

        Args:
            source_path: Source video
            time_ms: Offset in milliseconds
            quality: Quality hint on the 0-100 scale
            scratch_dir: Directory for the temporary image

        Returns:
            Encoded image bytes, or None if extraction failed
        """
        request = ExtractionRequest(Path(source_path), time_ms, quality)
        return await self.extract_request(request, scratch_dir)

    async def extract_request(
        self, request: ExtractionRequest, scratch_dir: Path
    ) -> Optional[bytes]:
        """Extract the frame described by ``request``."""
        output_path = build_output_path(scratch_dir, request.time_ms)
        command = build_frame_command(
            input_file=request.source_path,
            output_file=output_path,
            seek_seconds=request.seek_seconds,
            native_quality=request.native_quality,
            binary=self.ffmpeg_path,
        )

        logger.debug(f"Executing FFmpeg command: {' '.join(command)}")

        try:
            await AsyncFFmpegProcess(command, timeout=self.timeout).run()

            if not output_path.exists():
                logger.warning(
                    f"FFmpeg reported success but produced no file for {request.time_ms} ms: "
                    f"{output_path}"
                )
                return None

            data = output_path.read_bytes()
            logger.debug(f"Read {len(data)} bytes for {request.time_ms} ms from {output_path.name}")
            return data

        except FFmpegError as e:
            logger.error(f"Thumbnail extraction failed for {request.time_ms} ms: {e}")
            if e.stderr:
                logger.error(f"FFmpeg logs:\n{e.stderr}")
            return None

        except ProcessTimeoutError as e:
            logger.error(f"Thumbnail extraction timed out for {request.time_ms} ms: {e}")
            return None

        except OSError as e:
            logger.error(f"Could not read thumbnail for {request.time_ms} ms: {e}")
            return None

        except Exception as e:
            logger.error(
                f"Unexpected error extracting thumbnail for {request.time_ms} ms: {e}",
                exc_info=True,
            )
            return None

        finally:
            _remove_scratch_file(output_path)


def _remove_scratch_file(path: Path) -> None:
    """Delete ``path`` if present; failures are logged, never raised."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Error deleting temporary thumbnail file {path}: {e}")
