"""
Evenly spaced timestamp schedules.

Trim bar thumbnails sample ``N`` points after the start, ending exactly on
the last millisecond. Cover candidates sample ``N`` points starting at the
window start, shifted by the trim start when the editor is trimmed.
"""

from ..models import VideoEditorState


def _check_duration(duration_ms: int) -> None:
    if duration_ms < 0:
        raise ValueError(f"duration_ms must be >= 0, got {duration_ms}")


def trim_timestamps(duration_ms: int, quantity: int) -> list[int]:
    """
    Timestamps for trim bar thumbnails: ``round(duration * i / N)`` for i in 1..N.

    Args:
        duration_ms: Full media duration
        quantity: Number of thumbnails

    Returns:
        ``quantity`` offsets in (0, duration_ms]
    """
    _check_duration(duration_ms)
    if quantity <= 0:
        return []
    return [round(duration_ms * i / quantity) for i in range(1, quantity + 1)]


def cover_timestamps(duration_ms: int, quantity: int, offset_ms: int = 0) -> list[int]:
    """
    Timestamps for cover candidates: ``round(duration * i / N) + offset`` for i in 0..N-1.

    Args:
        duration_ms: Length of the sampled window
        quantity: Number of candidates
        offset_ms: Window start

    Returns:
        ``quantity`` offsets in [offset_ms, offset_ms + duration_ms)
    """
    _check_duration(duration_ms)
    if quantity <= 0:
        return []
    return [round(duration_ms * i / quantity) + offset_ms for i in range(quantity)]


def cover_timestamps_for(state: VideoEditorState, quantity: int) -> list[int]:
    """Cover schedule over the trim window when trimmed, else the whole media."""
    if state.is_trimmed:
        return cover_timestamps(state.trimmed_duration_ms, quantity, state.start_trim_ms)
    return cover_timestamps(state.video_duration_ms, quantity)
