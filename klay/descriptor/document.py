"""Reading and writing descriptor TOML files."""

import logging
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import ValidationError
from tomlkit.exceptions import ParseError as TomlParseError

from klay.core.errors import MalformedSectionError, TooManyOutputSlotsError
from klay.descriptor.models import Descriptor
from klay.linux.keysyms import EMPTY
from klay.linux.models import MAX_OUTPUTS


logger = logging.getLogger(__name__)


def _trim(outputs: list[str]) -> list[str]:
    trimmed = list(outputs)
    while trimmed and trimmed[-1] == EMPTY:
        trimmed.pop()
    return trimmed


def parse_descriptor(text: str) -> Descriptor:
    """Parse descriptor TOML text.

    Raises:
        MalformedSectionError: If the TOML or its content is invalid
        TooManyOutputSlotsError: If a key lists more than four outputs
    """
    try:
        data: dict[str, Any] = tomlkit.loads(text).unwrap()
    except TomlParseError as e:
        raise MalformedSectionError(f"Invalid TOML: {e}", e.line) from e

    for name, outputs in (data.get("keymap") or {}).items():
        if isinstance(outputs, list) and len(outputs) > MAX_OUTPUTS:
            raise TooManyOutputSlotsError(len(outputs), MAX_OUTPUTS, {"key": name})

    try:
        return Descriptor.model_validate(data)
    except ValidationError as e:
        raise MalformedSectionError(f"Invalid descriptor: {e}") from e


def format_descriptor(descriptor: Descriptor) -> str:
    """Serialize a descriptor, leaving out trailing empty outputs."""
    data = {
        "metadata": descriptor.metadata.model_dump(),
        "keymap": {key.value: _trim(outputs) for key, outputs in descriptor.sorted_keymap()},
        "special": {
            name: {"deadkey": special.deadkey}
            for name, special in sorted(descriptor.special.items())
        },
    }
    return tomlkit.dumps(data)


def read_descriptor(path: Path) -> Descriptor:
    logger.debug("Reading descriptor %s", path)
    return parse_descriptor(path.read_text(encoding="utf-8"))


def write_descriptor(descriptor: Descriptor, path: Path) -> None:
    path.write_text(format_descriptor(descriptor), encoding="utf-8")
    logger.debug("Wrote descriptor with %d keys to %s", len(descriptor.keymap), path)
