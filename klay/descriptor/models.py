"""Models for the platform independent TOML layout descriptor."""

from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from klay.linux.keysyms import EMPTY
from klay.linux.models import MAX_OUTPUTS, LinuxKey
from klay.models.base import KlayBaseModel


class KeyboardKey(str, Enum):
    """Key positions used in descriptor keymaps."""

    TLD = "tld"
    E01 = "e01"
    E02 = "e02"
    E03 = "e03"
    E04 = "e04"
    E05 = "e05"
    E06 = "e06"
    E07 = "e07"
    E08 = "e08"
    E09 = "e09"
    E10 = "e10"
    E11 = "e11"
    E12 = "e12"
    D01 = "d01"
    D02 = "d02"
    D03 = "d03"
    D04 = "d04"
    D05 = "d05"
    D06 = "d06"
    D07 = "d07"
    D08 = "d08"
    D09 = "d09"
    D10 = "d10"
    D11 = "d11"
    D12 = "d12"
    C01 = "c01"
    C02 = "c02"
    C03 = "c03"
    C04 = "c04"
    C05 = "c05"
    C06 = "c06"
    C07 = "c07"
    C08 = "c08"
    C09 = "c09"
    C10 = "c10"
    C11 = "c11"
    BKS = "bks"
    LGT = "lgt"
    B01 = "b01"
    B02 = "b02"
    B03 = "b03"
    B04 = "b04"
    B05 = "b05"
    B06 = "b06"
    B07 = "b07"
    B08 = "b08"
    B09 = "b09"
    B10 = "b10"
    SPC = "spc"
    KPD = "kpd"

    @classmethod
    def from_name(cls, name: str) -> "KeyboardKey":
        """Look up a key by name or alias.

        Raises:
            ValueError: If the name is unknown
        """
        name = name.lower()
        if name in KEY_ALIASES:
            return KEY_ALIASES[name]
        return cls(name)

    def to_linux(self) -> LinuxKey:
        return _TO_LINUX[self]

    @classmethod
    def from_linux(cls, key: LinuxKey) -> "KeyboardKey":
        return _FROM_LINUX[key]


KEY_ALIASES = {
    "pls": KeyboardKey.E11,
    "act": KeyboardKey.E12,
    "cma": KeyboardKey.B08,
    "per": KeyboardKey.B09,
    "min": KeyboardKey.B10,
}

_ROW_PREFIXES = {"e": "AE", "d": "AD", "c": "AC", "b": "AB"}
_NAMED = {
    KeyboardKey.TLD: LinuxKey.TLDE,
    KeyboardKey.BKS: LinuxKey.BKSL,
    KeyboardKey.LGT: LinuxKey.LSGT,
    KeyboardKey.SPC: LinuxKey.SPCE,
    KeyboardKey.KPD: LinuxKey.KPDL,
}


def _linux_key(key: KeyboardKey) -> LinuxKey:
    if key in _NAMED:
        return _NAMED[key]
    return LinuxKey(_ROW_PREFIXES[key.value[0]] + key.value[1:])


_TO_LINUX = {key: _linux_key(key) for key in KeyboardKey}
_FROM_LINUX = {linux: key for key, linux in _TO_LINUX.items()}


class Metadata(KlayBaseModel):
    name: str = ""
    description: str = ""
    short: str = ""
    locale: str = ""
    version: str = ""
    author: str = ""


class DeadKeySpecial(KlayBaseModel):
    """A ``[special]`` entry naming a dead key by the character it shows."""

    deadkey: str

    @field_validator("deadkey")
    @classmethod
    def validate_deadkey(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError(f"deadkey must be a single character, got {v!r}")
        return v


class Descriptor(KlayBaseModel):
    """A layout as a keymap of outputs per key position.

    Each output is either a single character or the name of a ``[special]``
    entry. Keymap entries always hold four outputs; missing trailing outputs
    are filled with U+0000.
    """

    metadata: Metadata = Field(default_factory=Metadata)
    keymap: dict[KeyboardKey, list[str]] = Field(default_factory=dict)
    special: dict[str, DeadKeySpecial] = Field(default_factory=dict)

    @field_validator("keymap", mode="before")
    @classmethod
    def normalize_keys(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        normalized: dict[KeyboardKey, Any] = {}
        for name, outputs in v.items():
            key = name if isinstance(name, KeyboardKey) else KeyboardKey.from_name(str(name))
            normalized[key] = outputs
        return normalized

    @field_validator("keymap")
    @classmethod
    def pad_outputs(cls, v: dict[KeyboardKey, list[str]]) -> dict[KeyboardKey, list[str]]:
        padded = {}
        for key, outputs in v.items():
            if len(outputs) > MAX_OUTPUTS:
                raise ValueError(
                    f"Too many outputs set for {key.value}: got {len(outputs)}, "
                    f"at most {MAX_OUTPUTS} allowed"
                )
            padded[key] = list(outputs) + [EMPTY] * (MAX_OUTPUTS - len(outputs))
        return padded

    @model_validator(mode="after")
    def validate_outputs(self) -> "Descriptor":
        for name in self.special:
            if len(name) < 2:
                raise ValueError(f"Special name {name!r} must be longer than one character")
        for key, outputs in self.keymap.items():
            for output in outputs:
                if len(output) != 1 and output not in self.special:
                    raise ValueError(
                        f"Output {output!r} of {key.value} is neither a character "
                        "nor a special name"
                    )
        return self

    def sorted_keymap(self) -> list[tuple[KeyboardKey, list[str]]]:
        order = {key: index for index, key in enumerate(KeyboardKey)}
        return sorted(self.keymap.items(), key=lambda item: order[item[0]])
