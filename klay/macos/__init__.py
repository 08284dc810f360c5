"""macOS keylayout support."""

from klay.macos.keycodes import MAC_KEY_CODES, mac_key_code
from klay.macos.keylayout import (
    Action,
    KeyEntry,
    KeyLayout,
    KeyMap,
    When,
    build_keylayout,
    escape_text,
    format_keylayout,
    parse_keylayout,
    read_keylayout,
    write_keylayout,
)


__all__ = [
    "MAC_KEY_CODES",
    "Action",
    "KeyEntry",
    "KeyLayout",
    "KeyMap",
    "When",
    "build_keylayout",
    "escape_text",
    "format_keylayout",
    "mac_key_code",
    "parse_keylayout",
    "read_keylayout",
    "write_keylayout",
]
