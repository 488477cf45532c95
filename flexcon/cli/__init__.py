"""Command-line interface."""

from flexcon.cli.main import main

__all__ = ["main"]
