"""
Shared fixtures.

``fake_ffmpeg`` writes a small executable that accepts the same arguments as
ffmpeg's single-frame invocation, so the real subprocess path can be
exercised without ffmpeg installed.
"""

import asyncio
import json
import logging
import os
import stat
import sys
from pathlib import Path
from typing import Callable, Optional

import pytest

from video_thumbnailer.models import VideoEditorState

FAKE_JPEG_HEADER = b"\xff\xd8\xff\xe0"

_FAKE_FFMPEG_TEMPLATE = """#!{python}
import json
import sys
import time

args = sys.argv[1:]
mode = {mode!r}
with open({calls!r}, "a", encoding="utf-8") as log:
    log.write(json.dumps(args) + "\\n")

output = args[-1]
seek = args[args.index("-ss") + 1] if "-ss" in args else "0"

if mode == "sleep":
    time.sleep(30)
if mode in ("success", "partial"):
    with open(output, "wb") as f:
        f.write({header!r} + b"frame@" + seek.encode())
if mode in ("success", "no_output"):
    sys.exit(0)

sys.stderr.write("ffmpeg version fake\\n")
sys.stderr.write("input.mp4: Invalid data found when processing input\\n")
sys.exit(1)
"""


@pytest.fixture
def make_fake_ffmpeg(tmp_path) -> Callable[[str], Path]:
    """Factory creating a fake ffmpeg executable in the given mode."""
    if sys.platform == "win32":
        pytest.skip("fake ffmpeg relies on a shebang script")

    def _make(mode: str = "success") -> Path:
        script = tmp_path / f"fake-ffmpeg-{mode}"
        script.write_text(
            _FAKE_FFMPEG_TEMPLATE.format(
                python=sys.executable,
                mode=mode,
                calls=str(tmp_path / "ffmpeg-calls.jsonl"),
                header=FAKE_JPEG_HEADER,
            ),
            encoding="utf-8",
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def ffmpeg_calls(tmp_path) -> Callable[[], list[list[str]]]:
    """Read back the argument lists the fake ffmpeg was invoked with."""

    def _calls() -> list[list[str]]:
        log = tmp_path / "ffmpeg-calls.jsonl"
        if not log.exists():
            return []
        return [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]

    return _calls


@pytest.fixture
def scratch_dir(tmp_path) -> Path:
    """Empty scratch directory."""
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def video_file(tmp_path) -> Path:
    """Placeholder source video."""
    path = tmp_path / "input.mp4"
    path.write_bytes(b"not really a video")
    return path


@pytest.fixture
def editor_state(video_file) -> VideoEditorState:
    """Untrimmed 10 second editor state."""
    return VideoEditorState(file=video_file, video_duration_ms=10_000)


class FakeExtractor:
    """
    In-memory ``FrameExtractor``.

    ``fail_at`` timestamps return None, ``raise_at`` timestamps raise, and
    ``delays`` maps timestamps to seconds to sleep before answering.
    """

    def __init__(
        self,
        fail_at: Optional[set[int]] = None,
        raise_at: Optional[set[int]] = None,
        delays: Optional[dict[int, float]] = None,
        always_fail: bool = False,
    ):
        self.fail_at = fail_at or set()
        self.raise_at = raise_at or set()
        self.delays = delays or {}
        self.always_fail = always_fail
        self.calls: list[tuple[Path, int, int, Path]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def extract(self, source_path, time_ms, quality, scratch_dir):
        self.calls.append((source_path, time_ms, quality, scratch_dir))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if time_ms in self.delays:
                await asyncio.sleep(self.delays[time_ms])
            if time_ms in self.raise_at:
                raise RuntimeError(f"boom at {time_ms}")
            if self.always_fail or time_ms in self.fail_at:
                return None
            return f"jpeg@{time_ms}".encode()
        finally:
            self.in_flight -= 1

    @property
    def requested_times(self) -> list[int]:
        return [call[1] for call in self.calls]


@pytest.fixture
def fake_extractor() -> FakeExtractor:
    return FakeExtractor()


def scratch_leftovers(directory: Path) -> list[str]:
    """Names of thumbnail files left in ``directory``."""
    return sorted(name for name in os.listdir(directory) if name.startswith("thumbnail_"))


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logger() so caplog sees records in every test."""
    yield
    logger = logging.getLogger("video_thumbnailer")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
