"""Command-line interface for klay."""

from klay.cli.app import app, main


__all__ = ["app", "main"]
