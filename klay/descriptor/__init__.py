"""Platform independent TOML layout descriptor."""

from klay.descriptor.convert import descriptor_from_xkb, descriptor_to_xkb
from klay.descriptor.document import (
    format_descriptor,
    parse_descriptor,
    read_descriptor,
    write_descriptor,
)
from klay.descriptor.models import (
    KEY_ALIASES,
    DeadKeySpecial,
    Descriptor,
    KeyboardKey,
    Metadata,
)


__all__ = [
    "KEY_ALIASES",
    "DeadKeySpecial",
    "Descriptor",
    "KeyboardKey",
    "Metadata",
    "descriptor_from_xkb",
    "descriptor_to_xkb",
    "format_descriptor",
    "parse_descriptor",
    "read_descriptor",
    "write_descriptor",
]
