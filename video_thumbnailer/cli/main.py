"""
CLI interface for the video thumbnailer.

This module provides the command-line interface using Typer and Rich.
"""

import asyncio
import sys
from pathlib import Path
from typing import Coroutine, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..config import ThumbnailerConfig, get_config_manager
from ..inspector import MediaInspector
from ..models import CoverData, VideoEditorState
from ..thumbnails import ThumbnailGenerator, trim_timestamps
from ..utils import (
    ExtractionError,
    ThumbnailerError,
    ensure_directory,
    format_size,
    format_timestamp_ms,
    get_logger,
    setup_logger,
)

app = typer.Typer(
    name="video-thumbnailer",
    help="Extract trim bar thumbnails and cover frames from videos with ffmpeg",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

logger = get_logger(__name__)

INPUT_ARGUMENT = typer.Argument(
    ...,
    exists=True,
    dir_okay=False,
    readable=True,
    help="Input video file",
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    exists=True,
    dir_okay=False,
    help="Custom configuration file",
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")
LOG_OPTION = typer.Option(None, "--log", help="Log file path")


def _prepare(verbose: bool, log_file: Optional[Path], config_file: Optional[Path]) -> ThumbnailerConfig:
    setup_logger(
        level="DEBUG" if verbose else "WARNING",
        log_file=log_file,
        verbose=verbose,
        console=err_console,
    )
    return get_config_manager(config_file).config


def _run(coro: Coroutine, verbose: bool) -> None:
    """Run ``coro`` and map failures to exit codes."""
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠ Cancelled by user[/yellow]")
        sys.exit(130)
    except ThumbnailerError as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        if verbose:
            console.print_exception()
        sys.exit(1)
    except ValueError as e:
        console.print(f"\n[bold red]✗ Invalid argument:[/bold red] {e}")
        sys.exit(2)


def _progress() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("[green]{task.fields[extracted]} extracted"),
        console=console,
        transient=True,
    )


def _results_table(title: str, rows: list[tuple[int, int, Path]]) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Timestamp", style="cyan")
    table.add_column("Size", style="yellow", justify="right")
    table.add_column("File", style="white")
    for index, (time_ms, size, path) in enumerate(rows, start=1):
        table.add_row(str(index), format_timestamp_ms(time_ms), format_size(size), path.name)
    return table


async def _probe(input_file: Path, config: ThumbnailerConfig):
    inspector = MediaInspector(config.ffmpeg.ffprobe_path, timeout=config.ffmpeg.timeout)
    return await inspector.inspect(input_file)


@app.command("info")
def info_command(
    input_file: Path = INPUT_ARGUMENT,
    config_file: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Show the media details thumbnail scheduling relies on.
    """
    config = _prepare(verbose, None, config_file)

    async def _info() -> None:
        media_info = await _probe(input_file, config)

        table = Table(title=input_file.name, show_header=False)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("Format", media_info.format_name or "unknown")
        table.add_row("Duration", format_timestamp_ms(media_info.duration_ms))
        table.add_row("Resolution", media_info.resolution)
        table.add_row("Video codec", media_info.video_codec or "none")
        table.add_row("Size", format_size(media_info.size))
        console.print(table)

    _run(_info(), verbose)


@app.command("trim")
def trim_command(
    input_file: Path = INPUT_ARGUMENT,
    output_dir: Path = typer.Option(
        Path("thumbnails"), "--output", "-o", help="Directory to write thumbnails to"
    ),
    count: Optional[int] = typer.Option(
        None, "--count", "-n", min=1, help="Number of thumbnails (default: from config)"
    ),
    quality: Optional[int] = typer.Option(
        None, "--quality", "-q", min=0, max=100, help="Quality hint 0-100 (default: from config)"
    ),
    config_file: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    log_file: Optional[Path] = LOG_OPTION,
) -> None:
    """
    Extract evenly spaced trim bar thumbnails across the whole video.
    """
    config = _prepare(verbose, log_file, config_file)
    quantity = count or config.thumbnails.trim_quantity
    hint = config.thumbnails.trim_quality if quality is None else quality

    async def _trim() -> None:
        media_info = await _probe(input_file, config)
        state = VideoEditorState.from_media_info(media_info, trim_thumbnails_quality=hint)
        generator = ThumbnailGenerator.from_config(config)

        timestamps = trim_timestamps(state.video_duration_ms, quantity)
        thumbnails: list[bytes] = []
        extracted_at: list[int] = []

        with _progress() as progress:
            task = progress.add_task("Trim thumbnails", total=quantity, extracted=0)
            attempt = 0
            async for snapshot in generator.trim_thumbnails(state, quantity):
                if len(snapshot) > len(thumbnails):
                    extracted_at.append(timestamps[attempt])
                thumbnails = snapshot
                attempt += 1
                progress.update(task, advance=1, extracted=len(thumbnails))

        if not thumbnails:
            raise ExtractionError(f"No thumbnails could be extracted from {input_file}")

        ensure_directory(output_dir)
        written: list[tuple[int, int, Path]] = []
        for index, (data, time_ms) in enumerate(zip(thumbnails, extracted_at), start=1):
            path = output_dir / f"trim_{index:03d}.jpg"
            path.write_bytes(data)
            written.append((time_ms, len(data), path))

        console.print(_results_table(f"{len(written)}/{quantity} trim thumbnails", written))

    _run(_trim(), verbose)


@app.command("covers")
def covers_command(
    input_file: Path = INPUT_ARGUMENT,
    output_dir: Path = typer.Option(
        Path("covers"), "--output", "-o", help="Directory to write cover candidates to"
    ),
    count: Optional[int] = typer.Option(
        None, "--count", "-n", min=1, help="Number of candidates (default: from config)"
    ),
    start_ms: int = typer.Option(0, "--start-ms", min=0, help="Trim window start in ms"),
    end_ms: Optional[int] = typer.Option(
        None, "--end-ms", min=0, help="Trim window end in ms (default: end of video)"
    ),
    quality: Optional[int] = typer.Option(
        None, "--quality", "-q", min=0, max=100, help="Quality hint 0-100 (default: from config)"
    ),
    config_file: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    log_file: Optional[Path] = LOG_OPTION,
) -> None:
    """
    Extract cover candidates spread over the (optionally trimmed) video.
    """
    config = _prepare(verbose, log_file, config_file)
    quantity = count or config.thumbnails.cover_quantity
    hint = config.thumbnails.cover_quality if quality is None else quality

    async def _covers() -> None:
        media_info = await _probe(input_file, config)
        state = VideoEditorState.with_trim_ms(
            media_info.path,
            media_info.duration_ms,
            start_ms=start_ms,
            end_ms=end_ms,
            cover_thumbnails_quality=hint,
        )
        generator = ThumbnailGenerator.from_config(config)

        covers: list[CoverData] = []
        with _progress() as progress:
            task = progress.add_task("Cover candidates", total=quantity, extracted=0)
            async for covers in generator.cover_thumbnails(state, quantity):
                progress.update(task, advance=1, extracted=len(covers))

        if not covers:
            raise ExtractionError(f"No cover candidates could be extracted from {input_file}")

        ensure_directory(output_dir)
        written: list[tuple[int, int, Path]] = []
        for cover in covers:
            if cover.thumb_data is None:
                continue
            path = output_dir / f"cover_{cover.time_ms}.jpg"
            path.write_bytes(cover.thumb_data)
            written.append((cover.time_ms, len(cover.thumb_data), path))

        console.print(_results_table(f"{len(written)}/{quantity} cover candidates", written))

    _run(_covers(), verbose)


@app.command("cover")
def cover_command(
    input_file: Path = INPUT_ARGUMENT,
    output: Path = typer.Option(Path("cover.jpg"), "--output", "-o", help="Image file to write"),
    time_ms: int = typer.Option(0, "--time-ms", "-t", min=0, help="Offset in milliseconds"),
    quality: Optional[int] = typer.Option(
        None, "--quality", "-q", min=0, max=100, help="Quality hint 0-100 (default: from config)"
    ),
    config_file: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    log_file: Optional[Path] = LOG_OPTION,
) -> None:
    """
    Extract a single cover frame.
    """
    config = _prepare(verbose, log_file, config_file)
    hint = config.thumbnails.cover_quality if quality is None else quality

    async def _cover() -> None:
        generator = ThumbnailGenerator.from_config(config)
        cover = await generator.single_cover(input_file, time_ms=time_ms, quality=hint)
        if cover.thumb_data is None:
            raise ExtractionError(
                f"Could not extract a frame at {format_timestamp_ms(time_ms)} from {input_file}"
            )

        ensure_directory(output.parent)
        output.write_bytes(cover.thumb_data)
        console.print(
            f"[green]✓[/green] Cover at {format_timestamp_ms(cover.time_ms)} written to "
            f"{output} ({format_size(len(cover.thumb_data))})"
        )

    _run(_cover(), verbose)


@app.command("config")
def config_command(
    action: str = typer.Argument(..., help="Action: init, show"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output path for config file (init action)"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
    config_file: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    Manage configuration.

    Actions:
    - init: Create a default configuration file
    - show: Display the active configuration
    """
    if action == "init":
        output_path = output or Path(".video-thumbnailer.yaml")
        try:
            get_config_manager().init_default_config(output_path, force=force)
        except ThumbnailerError as e:
            console.print(f"[red]✗ Error:[/red] {e}")
            sys.exit(1)
        console.print(f"[green]✓[/green] Created config file: {output_path}")

    elif action == "show":
        try:
            config = get_config_manager(config_file).config
        except ThumbnailerError as e:
            console.print(f"[red]✗ Error:[/red] {e}")
            sys.exit(1)

        table = Table(title="Current Configuration", show_header=True)
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="white")
        for section_name, section in (("ffmpeg", config.ffmpeg), ("thumbnails", config.thumbnails)):
            for key, value in section.model_dump().items():
                table.add_row(f"{section_name}.{key}", str(value))
        console.print(table)

    else:
        console.print(f"[red]✗ Unknown action:[/red] {action}")
        console.print("Valid actions: init, show")
        sys.exit(1)


@app.command("version")
def version_command() -> None:
    """
    Display version information.
    """
    from .. import __version__

    console.print(
        Panel.fit(
            f"[bold cyan]Video Thumbnailer[/bold cyan]\n[dim]Version {__version__}[/dim]",
            border_style="cyan",
        )
    )


def main() -> None:
    """
    Main entry point for CLI.
    """
    app()


if __name__ == "__main__":
    main()
