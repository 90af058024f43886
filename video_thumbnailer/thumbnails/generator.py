"""
Progressive thumbnail generation for a video editor.

Trim bar thumbnails and cover candidates are produced as async generators:
every scheduled timestamp yields a fresh snapshot of everything extracted so
far, so the UI can render thumbnails as they arrive. A timestamp that fails
contributes nothing and the batch moves on.
"""

from contextlib import aclosing
from pathlib import Path
from typing import AsyncIterator, Optional

from ..config import ThumbnailerConfig
from ..executor import OrderedExecutor
from ..models import DEFAULT_THUMBNAIL_QUALITY, CoverData, VideoEditorState
from ..utils import get_logger
from .extractor import FFmpegFrameExtractor, FrameExtractor, get_scratch_directory
from .scheduler import cover_timestamps_for, trim_timestamps

logger = get_logger(__name__)


class ThumbnailGenerator:
    """
    Generates trim bar thumbnails and cover candidates for an editor state.

    Extraction is delegated to a ``FrameExtractor``; the default runs ffmpeg.
    """

    def __init__(
        self,
        extractor: Optional[FrameExtractor] = None,
        scratch_dir: Optional[Path] = None,
        max_concurrency: int = 1,
    ):
        """
        Initialize thumbnail generator.

        Args:
            extractor: Frame extractor (ffmpeg on PATH if None)
            scratch_dir: Directory for temporary images (system temp if None)
            max_concurrency: Extractions in flight per batch; results are
                still emitted in timestamp order
        """
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.extractor: FrameExtractor = extractor or FFmpegFrameExtractor()
        self.scratch_dir = scratch_dir
        self.max_concurrency = max_concurrency

    @classmethod
    def from_config(
        cls, config: ThumbnailerConfig, extractor: Optional[FrameExtractor] = None
    ) -> "ThumbnailGenerator":
        """Create a generator from configuration."""
        return cls(
            extractor=extractor or FFmpegFrameExtractor.from_config(config),
            scratch_dir=config.thumbnails.scratch_dir,
            max_concurrency=config.thumbnails.max_concurrency,
        )

    async def trim_thumbnails(
        self, state: VideoEditorState, quantity: int
    ) -> AsyncIterator[list[bytes]]:
        """
        Generate ``quantity`` thumbnails spread over the whole media.

        Args:
            state: Editor state (source, duration, trim quality)
            quantity: Number of thumbnails

        Yields:
            Snapshot of extracted images after each timestamp
        """
        timestamps = trim_timestamps(state.video_duration_ms, quantity)
        thumbnails: list[bytes] = []

        batch = self._extract_batch(state.file, timestamps, state.trim_thumbnails_quality, "trim")
        async with aclosing(batch) as results:
            async for _, data in results:
                if data is not None:
                    thumbnails.append(data)
                yield list(thumbnails)

        logger.info(f"Trim thumbnails completed: {len(thumbnails)}/{len(timestamps)} generated")

    async def cover_thumbnails(
        self, state: VideoEditorState, quantity: int
    ) -> AsyncIterator[list[CoverData]]:
        """
        Generate ``quantity`` cover candidates over the trim window.

        Args:
            state: Editor state (source, trim window, cover quality)
            quantity: Number of candidates

        Yields:
            Snapshot of extracted covers after each timestamp
        """
        timestamps = cover_timestamps_for(state, quantity)
        covers: list[CoverData] = []

        batch = self._extract_batch(state.file, timestamps, state.cover_thumbnails_quality, "cover")
        async with aclosing(batch) as results:
            async for time_ms, data in results:
                if data is not None:
                    covers.append(CoverData(thumb_data=data, time_ms=time_ms))
                yield list(covers)

        logger.info(f"Cover thumbnails completed: {len(covers)}/{len(timestamps)} generated")

    async def single_cover(
        self,
        file_path: Path,
        time_ms: int = 0,
        quality: int = DEFAULT_THUMBNAIL_QUALITY,
    ) -> CoverData:
        """
        Extract one cover frame.

        Args:
            file_path: Source video
            time_ms: Offset in milliseconds
            quality: Quality hint on the 0-100 scale

        Returns:
            CoverData; ``thumb_data`` is None if extraction failed
        """
        thumb_data: Optional[bytes] = None
        try:
            scratch_dir = get_scratch_directory(self.scratch_dir)
            thumb_data = await self.extractor.extract(Path(file_path), time_ms, quality, scratch_dir)
        except Exception as e:
            logger.error(f"Error generating cover at {time_ms} ms: {e}", exc_info=True)

        if thumb_data is None:
            logger.warning(f"Single cover generation failed for time {time_ms} ms")
        return CoverData(thumb_data=thumb_data, time_ms=time_ms)

    async def _extract_batch(
        self, source: Path, timestamps: list[int], quality: int, label: str
    ) -> AsyncIterator[tuple[int, Optional[bytes]]]:
        """Yield ``(time_ms, bytes or None)`` per timestamp, in order."""
        scratch_dir = get_scratch_directory(self.scratch_dir)
        logger.debug(
            f"Extracting {len(timestamps)} {label} thumbnails from {source} "
            f"(scratch: {scratch_dir}, concurrency: {self.max_concurrency})"
        )

        async def extract(time_ms: int) -> Optional[bytes]:
            return await self.extractor.extract(source, time_ms, quality, scratch_dir)

        executor = OrderedExecutor(self.max_concurrency)
        async with aclosing(executor.map(extract, timestamps)) as results:
            async for result in results:
                if not result.success:
                    logger.error(
                        f"Error generating {label} thumbnail at {result.item} ms: {result.error}"
                    )
                    yield result.item, None
                    continue

                if result.value is None:
                    logger.debug(f"No {label} thumbnail produced for time {result.item} ms")
                yield result.item, result.value


async def generate_trim_thumbnails(
    state: VideoEditorState,
    quantity: int,
    extractor: Optional[FrameExtractor] = None,
    scratch_dir: Optional[Path] = None,
    max_concurrency: int = 1,
) -> AsyncIterator[list[bytes]]:
    """
    Convenience wrapper around ``ThumbnailGenerator.trim_thumbnails``.

    Yields:
        Snapshot of extracted images after each timestamp
    """
    generator = ThumbnailGenerator(extractor, scratch_dir, max_concurrency)
    async with aclosing(generator.trim_thumbnails(state, quantity)) as snapshots:
        async for snapshot in snapshots:
            yield snapshot


async def generate_cover_thumbnails(
    state: VideoEditorState,
    quantity: int,
    extractor: Optional[FrameExtractor] = None,
    scratch_dir: Optional[Path] = None,
    max_concurrency: int = 1,
) -> AsyncIterator[list[CoverData]]:
    """
    Convenience wrapper around ``ThumbnailGenerator.cover_thumbnails``.

    Yields:
        Snapshot of extracted covers after each timestamp
    """
    generator = ThumbnailGenerator(extractor, scratch_dir, max_concurrency)
    async with aclosing(generator.cover_thumbnails(state, quantity)) as snapshots:
        async for snapshot in snapshots:
            yield snapshot


async def generate_single_cover_thumbnail(
    file_path: Path,
    time_ms: int = 0,
    quality: int = DEFAULT_THUMBNAIL_QUALITY,
    extractor: Optional[FrameExtractor] = None,
    scratch_dir: Optional[Path] = None,
) -> CoverData:
    """
    Convenience wrapper around ``ThumbnailGenerator.single_cover``.

    Returns:
        CoverData; ``thumb_data`` is None if extraction failed
    """
    generator = ThumbnailGenerator(extractor, scratch_dir)
    return await generator.single_cover(file_path, time_ms, quality)
