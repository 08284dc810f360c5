"""CLI helper utilities."""

from klay.cli.helpers.context import get_user_config_from_context
from klay.cli.helpers.formats import LayoutFormat, detect_format
from klay.cli.helpers.theme import (
    Colors,
    Icons,
    ThemedConsole,
    create_basic_table,
    get_themed_console,
)


__all__ = [
    "Colors",
    "Icons",
    "LayoutFormat",
    "ThemedConsole",
    "create_basic_table",
    "detect_format",
    "get_themed_console",
    "get_user_config_from_context",
]
