"""Serialization of Windows KLC files."""

import logging
from pathlib import Path

from klay.utils.utf16 import ByteOrder, encode_utf16
from klay.windows.models import ShiftState, WinKey, WinKeyLayout


logger = logging.getLogger(__name__)

NEWLINE = "\r\n"

SHIFTSTATE_BLOCK = [
    "SHIFTSTATE",
    "",
    "0\t//Column 4",
    "1\t//Column 5 : Shft",
    "2\t//Column 6 :       Ctrl",
    "6\t//Column 7 :       Ctrl Alt",
    "7\t//Column 8 : Shft  Ctrl Alt",
    "",
]

LAYOUT_HEADER = [
    "LAYOUT\t\t;an extra '@' at the end is a dead key",
    "",
    "//SC\tVK_\t\tCap\t0\t1\t2\t6\t7",
    "//--\t----\t\t----\t----\t----\t----\t----\t----",
    "",
]


def format_char(char: str | None, dead: bool = False) -> str:
    """Format a character column as a 4-digit code point, ``-1`` when absent."""
    if char is None:
        return "-1"
    return f"{ord(char):04x}" + ("@" if dead else "")


def quote_name(name: str) -> str:
    if any(c.isspace() for c in name):
        return f'"{name}"'
    return name


def format_key(scan_code: int, key: WinKey) -> str:
    columns = [f"{scan_code:02x}", key.virtual_key, "", str(int(key.cap))]
    columns.extend(
        format_char(key.char(state), key.is_dead(state)) for state in ShiftState
    )
    return "\t".join(columns)


def format_klc(layout: WinKeyLayout) -> str:
    """Produce the canonical text of a KLC document with CRLF line endings."""
    lines = [f'KBD\t{layout.id}\t"{layout.name}"', ""]

    for keyword, value in (
        ("COPYRIGHT", layout.copyright),
        ("COMPANY", layout.company),
        ("LOCALENAME", layout.locale_name),
        ("LOCALEID", layout.locale_id),
    ):
        if value:
            lines.extend([f'{keyword}\t"{value}"', ""])
    lines.extend([f"VERSION\t{layout.version}", ""])

    lines.extend(SHIFTSTATE_BLOCK)
    lines.extend(LAYOUT_HEADER)
    lines.extend(
        format_key(scan_code, layout.layout[scan_code])
        for scan_code in sorted(layout.layout)
    )
    lines.append("")

    for base, table in layout.deadkeys.items():
        lines.extend([f"DEADKEY\t{format_char(base)}", ""])
        lines.extend(
            f"{format_char(combining)}\t{format_char(result)}"
            for combining, result in table.items()
        )
        lines.append("")

    for keyword, names in (
        ("KEYNAME", layout.key_names),
        ("KEYNAME_EXT", layout.key_names_ext),
    ):
        lines.extend([keyword, ""])
        lines.extend(f"{code:02x}\t{quote_name(name)}" for code, name in names.items())
        lines.append("")

    if layout.key_names_dead:
        lines.extend(["KEYNAME_DEAD", ""])
        lines.extend(
            f"{format_char(char)}\t{quote_name(name)}"
            for char, name in layout.key_names_dead.items()
        )
        lines.append("")

    for keyword, texts in (
        ("DESCRIPTIONS", layout.descriptions),
        ("LANGUAGENAMES", layout.language_names),
    ):
        lines.extend([keyword, ""])
        lines.extend(f"{locale}\t{text}" for locale, text in texts.items())
        lines.append("")

    lines.append("ENDKBD")
    return NEWLINE.join(lines) + NEWLINE


def write_klc(layout: WinKeyLayout, path: Path) -> None:
    """Write ``layout`` as UTF-16 little-endian with a byte-order mark."""
    path.write_bytes(encode_utf16(format_klc(layout), ByteOrder.LITTLE, bom=True))
    logger.debug("Wrote KLC layout %r with %d keys to %s", layout.id, len(layout.layout), path)
