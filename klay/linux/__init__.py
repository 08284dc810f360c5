"""Linux XKB symbols support."""

from klay.linux.formatter import (
    format_output,
    format_partial,
    format_symbols,
    write_symbols,
)
from klay.linux.keysyms import char_to_name, get_symbol_map, name_to_char
from klay.linux.models import (
    EMPTY_SLOT,
    CharOrDead,
    LinuxKey,
    Output,
    PartialXkbSymbols,
    XkbLayout,
)
from klay.linux.parser import SymbolsParser, parse_symbols, read_symbols


__all__ = [
    "EMPTY_SLOT",
    "CharOrDead",
    "LinuxKey",
    "Output",
    "PartialXkbSymbols",
    "SymbolsParser",
    "XkbLayout",
    "char_to_name",
    "format_output",
    "format_partial",
    "format_symbols",
    "get_symbol_map",
    "name_to_char",
    "parse_symbols",
    "read_symbols",
    "write_symbols",
]
