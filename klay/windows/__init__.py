"""Windows KLC layout support."""

from klay.windows.formatter import format_klc, write_klc
from klay.windows.models import CapsLockBehaviour, ShiftState, WinKey, WinKeyLayout
from klay.windows.parser import (
    KlcParser,
    parse_klc,
    parse_klc_text,
    read_klc,
    read_klc_stream,
)


__all__ = [
    "CapsLockBehaviour",
    "KlcParser",
    "ShiftState",
    "WinKey",
    "WinKeyLayout",
    "format_klc",
    "parse_klc",
    "parse_klc_text",
    "read_klc",
    "read_klc_stream",
    "write_klc",
]
