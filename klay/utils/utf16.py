"""UTF-16 transcoding with byte-order detection.

KLC files are written by the Microsoft Keyboard Layout Creator as UTF-16 with
a byte-order mark, but files edited by other tools are not always consistent.
:class:`Utf16Reader` decodes one 16-bit unit at a time for a fixed
:class:`ByteOrder`; :meth:`Utf16Reader.detect` picks the byte order from the
first unit and falls back to little-endian when there is no mark.
"""

import logging
from collections.abc import Iterator
from enum import Enum
from typing import BinaryIO

from klay.core.errors import InvalidSurrogatePairError


logger = logging.getLogger(__name__)

BOM = 0xFEFF
SWAPPED_BOM = 0xFFFE

HIGH_SURROGATES = range(0xD800, 0xDC00)
LOW_SURROGATES = range(0xDC00, 0xE000)


class ByteOrder(str, Enum):
    """Byte order of 16-bit code units."""

    LITTLE = "little"
    BIG = "big"

    def decode_unit(self, pair: bytes) -> int:
        return int.from_bytes(pair, self.value)

    @property
    def codec(self) -> str:
        """Python codec name for this byte order (without BOM handling)."""
        return "utf-16-le" if self is ByteOrder.LITTLE else "utf-16-be"


class Utf16Reader:
    """Decode UTF-16 code units from a binary stream.

    Args:
        stream: Binary stream positioned at the first code unit
        byte_order: Byte order used for every unit read from the stream
    """

    def __init__(self, stream: BinaryIO, byte_order: ByteOrder = ByteOrder.LITTLE):
        self.stream = stream
        self.byte_order = byte_order
        self.line_number = 0
        self._pending: int | None = None

    @classmethod
    def detect(cls, stream: BinaryIO) -> "Utf16Reader":
        """Create a reader whose byte order is taken from the byte-order mark.

        The first unit is read little-endian. ``0xFEFF`` selects little-endian
        and ``0xFFFE`` big-endian; in both cases the mark is consumed. Any other
        value is not an error: the reader is little-endian and the unit is
        returned again as ordinary data.
        """
        first = stream.read(2)
        if len(first) < 2:
            return cls(stream, ByteOrder.LITTLE)

        unit = ByteOrder.LITTLE.decode_unit(first)
        if unit == BOM:
            return cls(stream, ByteOrder.LITTLE)
        if unit == SWAPPED_BOM:
            return cls(stream, ByteOrder.BIG)

        logger.debug("No byte-order mark (first unit %04x), assuming little-endian", unit)
        reader = cls(stream, ByteOrder.LITTLE)
        reader._pending = unit
        return reader

    @property
    def is_little(self) -> bool:
        return self.byte_order is ByteOrder.LITTLE

    @property
    def is_big(self) -> bool:
        return self.byte_order is ByteOrder.BIG

    def read_unit(self) -> int | None:
        """Read one 16-bit unit, or ``None`` at end of input."""
        if self._pending is not None:
            unit, self._pending = self._pending, None
            return unit

        pair = self.stream.read(2)
        if len(pair) < 2:
            if pair:
                logger.debug("Ignoring dangling byte at end of UTF-16 input")
            return None
        return self.byte_order.decode_unit(pair)

    def next_char(self) -> str | None:
        """Decode the next character, combining surrogate pairs.

        Returns:
            The character, or ``None`` at end of input

        Raises:
            InvalidSurrogatePairError: If a surrogate is not part of a valid pair
        """
        unit = self.read_unit()
        if unit is None:
            return None

        if unit in LOW_SURROGATES:
            raise InvalidSurrogatePairError(
                f"Unpaired low surrogate {unit:04x}", self.line_number + 1
            )
        if unit not in HIGH_SURROGATES:
            return chr(unit)

        low = self.read_unit()
        if low is None:
            raise InvalidSurrogatePairError(
                f"High surrogate {unit:04x} at end of input", self.line_number + 1
            )
        if low not in LOW_SURROGATES:
            raise InvalidSurrogatePairError(
                f"High surrogate {unit:04x} followed by {low:04x}",
                self.line_number + 1,
            )
        return chr(0x10000 + ((unit - 0xD800) << 10) + (low - 0xDC00))

    def chars(self) -> Iterator[str]:
        """Iterate over the remaining characters."""
        while True:
            char = self.next_char()
            if char is None:
                return
            yield char

    def next_line(self) -> str | None:
        """Read the next line without its ``\\n`` or ``\\r\\n`` terminator.

        Returns:
            The line, or ``None`` when no character is left
        """
        chars: list[str] = []
        for char in self.chars():
            chars.append(char)
            if char == "\n":
                break

        if not chars:
            return None

        line = "".join(chars)
        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        self.line_number += 1
        return line

    def __iter__(self) -> Iterator[str]:
        while True:
            line = self.next_line()
            if line is None:
                return
            yield line


def detect(stream: BinaryIO) -> Utf16Reader:
    """Auto-detect the byte order of ``stream`` and return a reader for it."""
    return Utf16Reader.detect(stream)


def encode_utf16(
    text: str, byte_order: ByteOrder = ByteOrder.LITTLE, bom: bool = True
) -> bytes:
    """Encode ``text`` as UTF-16 with an optional leading byte-order mark."""
    data = text.encode(byte_order.codec)
    if bom:
        data = chr(BOM).encode(byte_order.codec) + data
    return data
