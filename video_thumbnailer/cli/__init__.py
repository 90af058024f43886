"""Command line interface."""

from video_thumbnailer.cli.main import app, main

__all__ = ["app", "main"]
