"""Parser for KLC files produced by the Microsoft Keyboard Layout Creator."""

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from pathlib import Path
from typing import BinaryIO

from pydantic import ValidationError

from klay.core.errors import (
    MalformedSectionError,
    TooManyOutputSlotsError,
    UnknownSectionKeywordError,
)
from klay.utils.utf16 import Utf16Reader
from klay.windows.models import CapsLockBehaviour, ShiftState, WinKey, WinKeyLayout


logger = logging.getLogger(__name__)

ABSENT = "-1"
DEAD_SUFFIX = "@"
LAYOUT_COLUMNS = list(ShiftState)


class Section(Enum):
    """Section of the file the parser is in."""

    NONE = "none"
    SHIFTSTATE = "SHIFTSTATE"
    LAYOUT = "LAYOUT"
    DEADKEY = "DEADKEY"
    KEYNAME = "KEYNAME"
    KEYNAME_EXT = "KEYNAME_EXT"
    KEYNAME_DEAD = "KEYNAME_DEAD"
    DESCRIPTIONS = "DESCRIPTIONS"
    LANGUAGENAMES = "LANGUAGENAMES"
    ATTRIBUTES = "ATTRIBUTES"


SECTION_KEYWORDS = {
    section.value: section
    for section in Section
    if section not in (Section.NONE, Section.DEADKEY)
}


def split_fields(line: str) -> list[str]:
    """Split a line on tabs, dropping empty fields and trailing comments."""
    fields = []
    for field in line.split("\t"):
        field = field.strip()
        if field.startswith("//") or field.startswith(";"):
            break
        if field:
            fields.append(field)
    return fields


def unquote(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def read_char(field: str) -> tuple[str | None, bool]:
    """Decode a character column.

    Returns:
        The character (``None`` for ``-1``) and whether it was marked dead

    Raises:
        ValueError: If the field is neither a character nor a hex code point
    """
    if field == ABSENT:
        return None, False
    dead = field.endswith(DEAD_SUFFIX)
    if dead:
        field = field[: -len(DEAD_SUFFIX)]
    if len(field) == 1:
        return field, dead
    return chr(int(field, 16)), dead


def read_scan_code(field: str) -> int:
    value = int(field, 16)
    if not 0 <= value <= 0xFF:
        raise ValueError(f"Scan code out of range: {field}")
    return value


class KlcParser:
    """State machine over the sections of a KLC file."""

    def __init__(self) -> None:
        self.layout = WinKeyLayout()
        self.section = Section.NONE
        self.deadkey: str | None = None
        self._headers: dict[str, Callable[[list[str], int], None]] = {
            "KBD": self._header_kbd,
            "COPYRIGHT": self._header_field("copyright"),
            "COMPANY": self._header_field("company"),
            "LOCALENAME": self._header_field("locale_name"),
            "LOCALEID": self._header_field("locale_id"),
            "VERSION": self._header_field("version", quoted=False),
        }

    def parse(self, lines: Iterable[str]) -> WinKeyLayout:
        """Parse KLC lines into a :class:`WinKeyLayout`.

        Raises:
            UnknownSectionKeywordError: On an unknown keyword outside a section
            MalformedSectionError: On a row that does not fit its section
            TooManyOutputSlotsError: On a LAYOUT row with extra columns
        """
        for line_number, line in enumerate(lines, start=1):
            fields = split_fields(line)
            if not fields:
                continue

            keyword = fields[0]
            if keyword == "ENDKBD":
                break
            if keyword in SECTION_KEYWORDS:
                self.section = SECTION_KEYWORDS[keyword]
                self.deadkey = None
            elif keyword == "DEADKEY":
                self._start_deadkey(fields, line_number)
            elif keyword in self._headers:
                self._headers[keyword](fields, line_number)
            else:
                self._parse_row(fields, line_number)

        logger.debug(
            "Parsed KLC layout %r: %d keys, %d dead keys",
            self.layout.id,
            len(self.layout.layout),
            len(self.layout.deadkeys),
        )
        return self.layout

    def _header_kbd(self, fields: list[str], line_number: int) -> None:
        self._require(fields, 3, line_number)
        self.layout.id = fields[1]
        self.layout.name = unquote(fields[2])

    def _header_field(
        self, attribute: str, quoted: bool = True
    ) -> Callable[[list[str], int], None]:
        def handler(fields: list[str], line_number: int) -> None:
            raw = fields[1] if len(fields) > 1 else ""
            value = unquote(raw) if quoted else raw
            setattr(self.layout, attribute, value)

        return handler

    def _start_deadkey(self, fields: list[str], line_number: int) -> None:
        self._require(fields, 2, line_number)
        base = self._char(fields[1], line_number)
        self.layout.deadkeys[base] = {}
        self.section = Section.DEADKEY
        self.deadkey = base

    def _parse_row(self, fields: list[str], line_number: int) -> None:
        section = self.section
        if section is Section.NONE:
            raise UnknownSectionKeywordError(
                f"Unknown key {fields[0]!r} with {fields[1:]!r}", line_number
            )
        if section in (Section.SHIFTSTATE, Section.ATTRIBUTES):
            return

        if section is Section.LAYOUT:
            self._parse_layout_row(fields, line_number)
            return

        self._require(fields, 2, line_number)
        if section is Section.DEADKEY:
            assert self.deadkey is not None
            combining = self._char(fields[0], line_number)
            result = self._char(fields[1], line_number)
            self.layout.deadkeys[self.deadkey][combining] = result
        elif section is Section.KEYNAME:
            self.layout.key_names[self._scan_code(fields[0], line_number)] = unquote(fields[1])
        elif section is Section.KEYNAME_EXT:
            self.layout.key_names_ext[self._scan_code(fields[0], line_number)] = unquote(fields[1])
        elif section is Section.KEYNAME_DEAD:
            char = self._char(fields[0], line_number)
            self.layout.key_names_dead[char] = unquote(fields[1])
        elif section is Section.DESCRIPTIONS:
            self.layout.descriptions[fields[0]] = fields[1]
        elif section is Section.LANGUAGENAMES:
            self.layout.language_names[fields[0]] = fields[1]

    def _parse_layout_row(self, fields: list[str], line_number: int) -> None:
        self._require(fields, 3 + len(LAYOUT_COLUMNS), line_number)
        if len(fields) > 3 + len(LAYOUT_COLUMNS):
            raise TooManyOutputSlotsError(
                len(fields) - 3, len(LAYOUT_COLUMNS), {"line_number": line_number}
            )

        scan_code = self._scan_code(fields[0], line_number)
        chars: dict[str, str | None] = {}
        dead_states = set()
        for state, field in zip(LAYOUT_COLUMNS, fields[3:], strict=True):
            try:
                char, dead = read_char(field)
            except ValueError as e:
                raise MalformedSectionError(
                    f"Invalid character {field!r} in LAYOUT row", line_number
                ) from e
            chars[state.field_name] = char
            if dead:
                dead_states.add(state)

        try:
            cap = CapsLockBehaviour.from_value(int(fields[2]))
            key = WinKey(
                virtual_key=fields[1],
                cap=cap,
                dead_states=frozenset(dead_states),
                **chars,
            )
        except (ValueError, ValidationError) as e:
            raise MalformedSectionError(
                f"Invalid caps lock behaviour {fields[2]!r}", line_number
            ) from e

        self.layout.layout[scan_code] = key

    @staticmethod
    def _require(fields: list[str], count: int, line_number: int) -> None:
        if len(fields) < count:
            raise MalformedSectionError(
                f"Expected {count} fields, got {len(fields)}: {fields!r}", line_number
            )

    @staticmethod
    def _char(field: str, line_number: int) -> str:
        try:
            char, _dead = read_char(field)
        except ValueError as e:
            raise MalformedSectionError(f"Invalid character {field!r}", line_number) from e
        if char is None:
            raise MalformedSectionError("Character must not be -1", line_number)
        return char

    @staticmethod
    def _scan_code(field: str, line_number: int) -> int:
        try:
            return read_scan_code(field)
        except ValueError as e:
            raise MalformedSectionError(f"Invalid scan code {field!r}", line_number) from e


def parse_klc(lines: Iterable[str]) -> WinKeyLayout:
    """Parse already decoded KLC lines."""
    return KlcParser().parse(lines)


def parse_klc_text(text: str) -> WinKeyLayout:
    """Parse KLC text, accepting both CRLF and LF line endings."""
    return parse_klc(text.splitlines())


def read_klc_stream(stream: BinaryIO) -> WinKeyLayout:
    """Parse a UTF-16 encoded KLC stream, detecting its byte order."""
    reader = Utf16Reader.detect(stream)
    logger.debug("Reading KLC as UTF-16 %s-endian", reader.byte_order.value)
    return parse_klc(reader)


def read_klc(path: Path) -> WinKeyLayout:
    """Read and parse a KLC file."""
    with path.open("rb") as stream:
        return read_klc_stream(stream)
