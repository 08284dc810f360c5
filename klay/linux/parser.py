"""Parser for XKB symbols files."""

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from klay.core.errors import (
    DuplicateDefaultBlockError,
    MalformedSectionError,
    TooManyOutputSlotsError,
)
from klay.linux.models import CharOrDead, LinuxKey, Output, PartialXkbSymbols, XkbLayout


logger = logging.getLogger(__name__)

PARTIAL_RE = re.compile(r"\bpartial\b")
XKB_SYMBOLS_RE = re.compile(r'xkb_symbols\s+"([^"]*)"')
KEY_RE = re.compile(r"key\s*<([A-Za-z0-9]+)>")
# A level list, not an index such as type[Group1]
LEVELS_RE = re.compile(r"(?<!\w)\[([^\[\]]*)\]")
INCLUDE_RE = re.compile(r'include\s+"([^"]*)"')
NAME_GROUP1_RE = re.compile(r'name\[Group1\]\s*=\s*"([^"]*)"')


class SymbolsParser:
    """Line-oriented parser for the default/partial block structure.

    Block headers and terminators are strict; lines inside a block that are
    not understood are logged and skipped.
    """

    def __init__(self) -> None:
        self.default_partial: PartialXkbSymbols | None = None
        self.partials: list[PartialXkbSymbols] = []
        self._is_default: bool | None = None
        self._current: PartialXkbSymbols | None = None

    def parse(self, lines: Iterable[str]) -> XkbLayout:
        """Parse symbols file lines into an :class:`XkbLayout`.

        Raises:
            MalformedSectionError: If a block header is missing or malformed
            DuplicateDefaultBlockError: If more than one block is the default
            TooManyOutputSlotsError: If a key lists more than four outputs
        """
        line_number = 0
        for line_number, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line or line.startswith("//"):
                continue
            self._feed(line, line_number)

        if self._current is not None:
            raise MalformedSectionError(
                f'Block "{self._current.name}" is not closed', line_number
            )
        if self._is_default is not None:
            raise MalformedSectionError(
                "Block declaration without xkb_symbols header", line_number
            )
        if self.default_partial is None:
            raise MalformedSectionError("No default symbols block found")

        return XkbLayout(default_partial=self.default_partial, partials=self.partials)

    def _feed(self, line: str, line_number: int) -> None:
        if self._is_default is None:
            self._start_block(line, line_number)
        elif self._current is None:
            self._read_header(line, line_number)
        elif line.startswith("}"):
            self._close_block()
        elif line == "{":
            pass
        else:
            self.process_line(self._current, line, line_number)

    def _start_block(self, line: str, line_number: int) -> None:
        if not PARTIAL_RE.search(line):
            raise MalformedSectionError(
                f"Expected a 'partial' block declaration, got {line!r}", line_number
            )

        is_default = line.startswith("default")
        if is_default and self.default_partial is not None:
            raise DuplicateDefaultBlockError(
                "Only one default symbols block is allowed", line_number
            )
        self._is_default = is_default

        # Declaration and header may share a line
        if XKB_SYMBOLS_RE.search(line):
            self._read_header(line, line_number)

    def _read_header(self, line: str, line_number: int) -> None:
        match = XKB_SYMBOLS_RE.search(line)
        if match is None:
            raise MalformedSectionError(
                f"Expected 'xkb_symbols \"name\"', got {line!r}", line_number
            )
        self._current = PartialXkbSymbols(name=match.group(1))

    def _close_block(self) -> None:
        partial = self._current
        assert partial is not None
        if self._is_default:
            self.default_partial = partial
        else:
            self.partials.append(partial)
        logger.debug("Parsed symbols block %r with %d keys", partial.name, len(partial.keys))
        self._current = None
        self._is_default = None

    def process_line(
        self, partial: PartialXkbSymbols, line: str, line_number: int
    ) -> None:
        """Apply one body line to ``partial``."""
        if line.startswith("key"):
            self._process_key(partial, line, line_number)
        elif line.startswith("include"):
            match = INCLUDE_RE.match(line)
            if match is None:
                logger.warning("Line %d: malformed include %r", line_number, line)
            elif not partial.set_include(match.group(1)):
                logger.debug("Line %d: ignoring additional include %r", line_number, match.group(1))
        elif line.startswith("name[Group1]"):
            match = NAME_GROUP1_RE.match(line)
            if match is None:
                logger.warning("Line %d: malformed group name %r", line_number, line)
            else:
                partial.set_name_group1(match.group(1))
        else:
            logger.warning("Line %d: unexpected line %r", line_number, line)

    def _process_key(
        self, partial: PartialXkbSymbols, line: str, line_number: int
    ) -> None:
        match = KEY_RE.match(line)
        levels = LEVELS_RE.search(line, match.end()) if match else None
        if match is None or levels is None:
            logger.warning("Line %d: unexpected key definition %r", line_number, line)
            return

        key = LinuxKey.from_name(match.group(1))
        if key is None:
            logger.warning("Line %d: unsupported key <%s>", line_number, match.group(1))
            return

        names = [name.strip() for name in levels.group(1).split(",")]
        if names == [""]:
            names = []

        slots: list[CharOrDead] = []
        for name in names:
            slot = CharOrDead.from_keysym(name)
            if slot is None:
                logger.warning(
                    "Line %d: unknown keysym %r on <%s>, key skipped",
                    line_number,
                    name,
                    key.value,
                )
                return
            slots.append(slot)

        try:
            partial.keys[key] = Output.from_slots(slots)
        except TooManyOutputSlotsError as e:
            e.context.update(line_number=line_number, key=key.value)
            raise


def parse_symbols(text: str) -> XkbLayout:
    """Parse the contents of an XKB symbols file."""
    return SymbolsParser().parse(text.splitlines())


def read_symbols(path: Path) -> XkbLayout:
    """Read and parse an XKB symbols file."""
    logger.debug("Reading symbols file %s", path)
    return parse_symbols(path.read_text(encoding="utf-8"))
