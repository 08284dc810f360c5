"""Bidirectional lookup between X11 keysym names and characters.

The table is read once from the packaged ``keysymdef.txt`` on first use and is
never modified afterwards, so it can be shared freely.
"""

import logging
import re
from collections.abc import Iterable
from functools import lru_cache
from importlib.resources import files
from types import MappingProxyType

from klay.core.errors import MalformedSectionError


logger = logging.getLogger(__name__)

KEYSYM_TABLE = "keysymdef.txt"
NO_SYMBOL = "NoSymbol"
EMPTY = "\0"

UNICODE_NAME = re.compile(r"U([0-9a-fA-F]+)")


class SymbolMap:
    """Immutable keysym name <-> character bi-map."""

    def __init__(self, pairs: Iterable[tuple[str, str]]):
        name_char: dict[str, str] = {}
        char_name: dict[str, str] = {}
        for name, char in pairs:
            name_char[name] = char
            # First name listed for a character is the canonical one
            char_name.setdefault(char, name)
        self._name_char = MappingProxyType(name_char)
        self._char_name = MappingProxyType(char_name)

    def get_char(self, name: str) -> str | None:
        return self._name_char.get(name)

    def get_name(self, char: str) -> str | None:
        return self._char_name.get(char)

    def __len__(self) -> int:
        return len(self._name_char)

    def __contains__(self, name: object) -> bool:
        return name in self._name_char


def parse_keysym_table(lines: Iterable[str]) -> list[tuple[str, str]]:
    """Parse ``name U<hex>`` lines, skipping blank lines and C-style comments.

    Raises:
        MalformedSectionError: If a line is not a name followed by a code point
    """
    pairs: list[tuple[str, str]] = []
    in_comment_block = False

    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if in_comment_block:
            if line.endswith("*/"):
                in_comment_block = False
            continue
        if line.startswith("/*"):
            in_comment_block = not line.endswith("*/")
            continue
        if not line or line.startswith("//"):
            continue

        fields = line.split()
        if len(fields) < 2 or not fields[1].startswith("U"):
            raise MalformedSectionError(
                f"Expected 'name U<hex>', got {line!r}", line_number
            )
        try:
            char = chr(int(fields[1][1:], 16))
        except ValueError as e:
            raise MalformedSectionError(
                f"Invalid code point {fields[1]!r}", line_number
            ) from e
        pairs.append((fields[0], char))

    return pairs


@lru_cache(maxsize=1)
def get_symbol_map() -> SymbolMap:
    """Return the process-wide symbol map, building it on first call."""
    text = files("klay.linux").joinpath(KEYSYM_TABLE).read_text(encoding="utf-8")
    pairs = parse_keysym_table(text.splitlines())
    pairs.append((NO_SYMBOL, EMPTY))
    symbol_map = SymbolMap(pairs)
    logger.debug("Loaded %d keysym names", len(symbol_map))
    return symbol_map


def char_to_name(char: str) -> str:
    """Keysym name for ``char``, or ``U<hex>`` when it has none."""
    name = get_symbol_map().get_name(char)
    if name is not None:
        return name
    return f"U{ord(char):04x}"


def name_to_char(name: str) -> str | None:
    """Character for a keysym name, accepting the ``U<hex>`` form as fallback."""
    char = get_symbol_map().get_char(name)
    if char is not None:
        return char
    match = UNICODE_NAME.fullmatch(name)
    if match is None:
        return None
    codepoint = int(match.group(1), 16)
    if codepoint > 0x10FFFF:
        return None
    return chr(codepoint)
