"""File format detection by extension."""

from enum import Enum
from pathlib import Path


class LayoutFormat(str, Enum):
    KLC = "klc"
    KEYLAYOUT = "keylayout"
    DESCRIPTOR = "toml"
    XKB = "xkb"


SUFFIXES = {
    ".klc": LayoutFormat.KLC,
    ".keylayout": LayoutFormat.KEYLAYOUT,
    ".toml": LayoutFormat.DESCRIPTOR,
}


def detect_format(path: Path) -> LayoutFormat:
    """Guess a layout format from the file extension; XKB files usually have none."""
    return SUFFIXES.get(path.suffix.lower(), LayoutFormat.XKB)
