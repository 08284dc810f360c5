"""x11-name command: print the X11 keysym name of characters."""

from typing import Annotated

import typer

from klay.cli.helpers.theme import get_themed_console
from klay.linux import char_to_name


def parse_char_argument(argument: str) -> str | None:
    """Turn ``U<hex>`` or a single character into a character."""
    if argument.startswith("U") and len(argument) > 1:
        try:
            code = int(argument[1:], 16)
        except ValueError:
            code = -1
        if 0 <= code <= 0x10FFFF:
            return chr(code)
    if len(argument) == 1:
        return argument
    return None


def x11_name_command(
    chars: Annotated[
        list[str],
        typer.Argument(help="Characters, or code points written as U<hex>"),
    ],
) -> None:
    """Print the X11 keysym name of each character."""
    themed = get_themed_console()
    failed = False
    for argument in chars:
        char = parse_char_argument(argument)
        if char is None:
            themed.print_error(f"couldn't translate `{argument}'")
            failed = True
            continue
        typer.echo(char_to_name(char))
    if failed:
        raise typer.Exit(1)


def register_commands(app: typer.Typer) -> None:
    """Register the x11-name command with the main app."""
    app.command(name="x11-name")(x11_name_command)
