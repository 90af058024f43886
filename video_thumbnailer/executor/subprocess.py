"""
Async subprocess wrapper for FFmpeg execution.

This module provides asynchronous process management for FFmpeg commands,
including stderr capture, timeout handling, cancellation and error reporting.
"""

import asyncio
import re
from pathlib import Path
from typing import AsyncIterator, Optional

from ..utils import FFmpegError, ProcessTimeoutError, get_logger

logger = get_logger(__name__)


class AsyncFFmpegProcess:
    """
    Async wrapper for FFmpeg subprocess execution.

    Provides non-blocking process execution with:
    - Line by line stderr capture for diagnostics
    - Timeout handling
    - Termination of the child when the awaiting task is cancelled
    """

    def __init__(
        self,
        command: list[str],
        timeout: Optional[float] = None,
    ):
        """
        Initialize async FFmpeg process.

        Args:
            command: FFmpeg command as list of arguments
            timeout: Maximum execution time in seconds (None = no timeout)
        """
        self.command = command
        self.timeout = timeout
        self._process: Optional[asyncio.subprocess.Process] = None

    async def run(self) -> tuple[str, str]:
        """
        Run FFmpeg command and wait for completion.

        Returns:
            Tuple of (stdout, stderr) as strings

        Raises:
            FFmpegError: If process fails
            ProcessTimeoutError: If process exceeds timeout
        """
        logger.debug(f"Full command: {' '.join(self.command)}")

        try:
            self._process = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )

            if self.timeout:
                stdout, stderr = await asyncio.wait_for(
                    self._communicate(),
                    timeout=self.timeout,
                )
            else:
                stdout, stderr = await self._communicate()

            if self._process.returncode != 0:
                error_msg = self._extract_error_message(stderr)
                raise FFmpegError(
                    f"FFmpeg failed with code {self._process.returncode}: {error_msg}",
                    command=self.command,
                    stderr=stderr,
                    returncode=self._process.returncode,
                )

            return stdout, stderr

        except asyncio.TimeoutError:
            logger.error(f"FFmpeg process exceeded timeout of {self.timeout}s")
            await self.terminate()
            raise ProcessTimeoutError(
                f"Process exceeded timeout of {self.timeout}s",
                timeout=self.timeout or 0.0,
            )

        except asyncio.CancelledError:
            logger.debug("FFmpeg process cancelled")
            await self.terminate()
            raise

        except FFmpegError:
            raise

        except OSError as e:
            raise FFmpegError(
                f"Failed to start {self.command[0]}: {e}",
                command=self.command,
            ) from e

    async def _communicate(self) -> tuple[str, str]:
        """
        Read stdout and stderr concurrently, then wait for exit.

        Returns:
            Tuple of (stdout, stderr) as strings
        """
        if not self._process:
            raise RuntimeError("Process not started")

        stdout, stderr = await asyncio.gather(self._read_stdout(), self._read_stderr())
        await self._process.wait()
        return stdout, stderr

    async def _read_stdout(self) -> str:
        if not self._process or not self._process.stdout:
            return ""

        stdout = await self._process.stdout.read()
        return stdout.decode(errors="replace") if stdout else ""

    async def _read_stderr(self) -> str:
        if not self._process or not self._process.stderr:
            return ""

        stderr_lines: list[str] = []
        async for line in self._stream_stderr():
            stderr_lines.append(line)

        return "\n".join(stderr_lines)

    async def _stream_stderr(self) -> AsyncIterator[str]:
        """
        Stream stderr line by line.

        Yields:
            Individual non-empty lines from stderr
        """
        if not self._process or not self._process.stderr:
            return

        while True:
            line_bytes = await self._process.stderr.readline()
            if not line_bytes:
                break

            line = line_bytes.decode(errors="replace").strip()
            if line:
                yield line

    def _extract_error_message(self, stderr: str) -> str:
        """
        Extract meaningful error message from stderr.

        Args:
            stderr: Complete stderr output

        Returns:
            Extracted error message or the last lines of stderr
        """
        error_patterns = [
            r"Error while (opening|decoding|encoding)",
            r"Invalid data found",
            r"No such file or directory",
            r"Permission denied",
            r"Output file is empty",
            r"Invalid argument",
        ]

        lines = stderr.split("\n")
        for pattern in error_patterns:
            match = re.search(pattern, stderr, re.IGNORECASE)
            if match:
                for i, line in enumerate(lines):
                    if match.group() in line:
                        return " | ".join(lines[i : i + 3])

        # Return last 3 non-empty lines as fallback
        non_empty = [line for line in lines if line.strip()]
        return " | ".join(non_empty[-3:]) if non_empty else "Unknown error"

    async def terminate(self) -> None:
        """
        Terminate the process gracefully.

        Sends SIGTERM, waits briefly, then sends SIGKILL if needed.
        """
        if not self._process:
            return

        try:
            if self._process.returncode is None:
                logger.debug("Terminating FFmpeg process...")
                self._process.terminate()

                try:
                    await asyncio.wait_for(self._process.wait(), timeout=5.0)
                except asyncio.TimeoutError:
                    logger.warning("Forcing process termination...")
                    self._process.kill()
                    await self._process.wait()

        except ProcessLookupError:
            pass
        except Exception as e:
            logger.error(f"Error during process termination: {e}")


class FFmpegCommandBuilder:
    """
    Builder for constructing FFmpeg commands.

    Input options are placed before their ``-i`` so that ``-ss`` seeks on the
    demuxer instead of decoding up to the offset.
    """

    def __init__(self, binary: str = "ffmpeg"):
        """
        Initialize command builder.

        Args:
            binary: FFmpeg executable name or path
        """
        self._command = [binary, "-hide_banner"]
        self._input_options: list[str] = []
        self._output_options: list[str] = []
        self._inputs: list[str] = []
        self._outputs: list[str] = []

    def input(
        self,
        file: Path,
        options: Optional[dict[str, str]] = None,
    ) -> "FFmpegCommandBuilder":
        """
        Add input file with options.

        Args:
            file: Input file path
            options: Input options as dict (e.g., {"ss": "2.5"})

        Returns:
            Self for chaining
        """
        if options:
            for key, value in options.items():
                self._input_options.append(f"-{key}")
                self._input_options.append(value)

        self._inputs.append(str(file))
        return self

    def output(
        self,
        file: Path,
        options: Optional[dict[str, str]] = None,
    ) -> "FFmpegCommandBuilder":
        """
        Add output file with options.

        Args:
            file: Output file path
            options: Output options as dict; empty values are emitted as flags

        Returns:
            Self for chaining
        """
        if options:
            for key, value in options.items():
                self._output_options.append(f"-{key}")
                if value:
                    self._output_options.append(value)

        self._outputs.append(str(file))
        return self

    def build(self) -> list[str]:
        """
        Build final command list.

        Returns:
            Complete FFmpeg command as list
        """
        command = self._command.copy()

        for input_file in self._inputs:
            if self._input_options:
                command.extend(self._input_options)
            command.extend(["-i", input_file])

        if self._output_options:
            command.extend(self._output_options)

        for output_file in self._outputs:
            command.append(output_file)

        return command


def build_frame_command(
    input_file: Path,
    output_file: Path,
    seek_seconds: float,
    native_quality: int,
    binary: str = "ffmpeg",
) -> list[str]:
    """
    Build a single-frame extraction command.

    Produces ``ffmpeg -hide_banner -ss <s> -i <in> -vframes 1 -q:v <q> -an -y <out>``.

    Args:
        input_file: Source video
        output_file: Image file to write
        seek_seconds: Offset into the source in seconds
        native_quality: Value passed to ``-q:v``
        binary: FFmpeg executable name or path

    Returns:
        FFmpeg command as list
    """
    builder = FFmpegCommandBuilder(binary)
    builder.input(input_file, {"ss": str(seek_seconds)})
    builder.output(
        output_file,
        {
            "vframes": "1",
            "q:v": str(native_quality),
            "an": "",
            "y": "",
        },
    )
    return builder.build()
