"""Exception hierarchy for klay.

Every error raised while reading, converting or writing a layout derives from
:class:`KlayError`. Parse errors additionally carry the 1-based line number of
the offending input line when it is known.
"""

from typing import Any


class KlayError(Exception):
    """Base exception for all klay errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class ConfigError(KlayError):
    """Raised when user configuration cannot be loaded or is invalid."""


class ParseError(KlayError):
    """Base class for errors raised while parsing a layout document."""

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context)
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"line {self.line_number}: {self.message}"


class MalformedSectionError(ParseError):
    """A row violates the active section's grammar or a header token is missing."""


class UnknownSectionKeywordError(ParseError):
    """A line starts with an unknown keyword while no section is active."""


class DuplicateDefaultBlockError(ParseError):
    """A second XKB symbols block claims to be the default one."""


class InvalidSurrogatePairError(ParseError):
    """A UTF-16 high surrogate is not followed by a valid low surrogate."""


class TooManyOutputSlotsError(KlayError):
    """More shift-state outputs were supplied for one key than the model holds."""

    def __init__(self, count: int, limit: int, context: dict[str, Any] | None = None):
        super().__init__(
            f"Too many outputs set: got {count}, at most {limit} allowed", context
        )
        self.count = count
        self.limit = limit


class ConversionError(KlayError):
    """Base class for errors raised while converting between layout formats."""


class UnsupportedScanCodeError(ConversionError):
    """A Windows scan code has no Linux key identifier."""

    def __init__(self, scan_code: int):
        super().__init__(
            f"Unsupported scan code {scan_code:02x}", {"scan_code": scan_code}
        )
        self.scan_code = scan_code


class PartialNotFoundError(ConversionError):
    """An include spec names a symbols block that the file does not define."""


class IncludeCycleError(ConversionError):
    """An include chain refers back to a block that is already being resolved."""

    def __init__(self, chain: list[str]):
        super().__init__(
            "Cyclic include: " + " -> ".join(chain), {"chain": list(chain)}
        )
        self.chain = list(chain)


__all__ = [
    "ConfigError",
    "ConversionError",
    "DuplicateDefaultBlockError",
    "IncludeCycleError",
    "InvalidSurrogatePairError",
    "KlayError",
    "MalformedSectionError",
    "ParseError",
    "PartialNotFoundError",
    "TooManyOutputSlotsError",
    "UnknownSectionKeywordError",
    "UnsupportedScanCodeError",
]
