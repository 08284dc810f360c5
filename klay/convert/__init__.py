"""Conversion between platform layout formats."""

from klay.convert.dead_keys import (
    ChainedDeadKeyResolver,
    DeadKeyResolverProtocol,
    MappingDeadKeyResolver,
    MemoizingDeadKeyResolver,
    PromptDeadKeyResolver,
    parse_dead_key_names,
)
from klay.convert.loader import SymbolsFileLoader
from klay.convert.scancodes import LINUX_TO_WIN, WIN_TO_LINUX, linux_to_win, win_to_linux
from klay.convert.service import (
    DEFAULT_INCLUDE,
    DEFAULT_PARTIAL,
    XkbConversionService,
    create_conversion_service,
    split_include_spec,
)


__all__ = [
    "DEFAULT_INCLUDE",
    "DEFAULT_PARTIAL",
    "LINUX_TO_WIN",
    "WIN_TO_LINUX",
    "ChainedDeadKeyResolver",
    "DeadKeyResolverProtocol",
    "MappingDeadKeyResolver",
    "MemoizingDeadKeyResolver",
    "PromptDeadKeyResolver",
    "SymbolsFileLoader",
    "XkbConversionService",
    "create_conversion_service",
    "linux_to_win",
    "parse_dead_key_names",
    "split_include_spec",
    "win_to_linux",
]
