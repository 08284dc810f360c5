"""CLI command modules."""

import typer

from klay.cli.commands.convert import register_commands as register_convert_commands
from klay.cli.commands.parse import register_commands as register_parse_commands
from klay.cli.commands.x11_name import register_commands as register_x11_name_commands


def register_all_commands(app: typer.Typer) -> None:
    """Register all CLI commands with the main app."""
    register_parse_commands(app)
    register_convert_commands(app)
    register_x11_name_commands(app)


__all__ = ["register_all_commands"]
