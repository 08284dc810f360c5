"""Models for XKB symbols files."""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum

from pydantic import Field

from klay.core.errors import TooManyOutputSlotsError
from klay.linux.keysyms import EMPTY, char_to_name, name_to_char
from klay.models.base import KlayBaseModel


MAX_OUTPUTS = 4
DEAD_PREFIX = "dead_"


class LinuxKey(str, Enum):
    """Physical key identifiers of the alphanumeric block.

    Declaration order is the order keys are written in.
    """

    AE01 = "AE01"
    AE02 = "AE02"
    AE03 = "AE03"
    AE04 = "AE04"
    AE05 = "AE05"
    AE06 = "AE06"
    AE07 = "AE07"
    AE08 = "AE08"
    AE09 = "AE09"
    AE10 = "AE10"
    AE11 = "AE11"
    AE12 = "AE12"
    AD01 = "AD01"
    AD02 = "AD02"
    AD03 = "AD03"
    AD04 = "AD04"
    AD05 = "AD05"
    AD06 = "AD06"
    AD07 = "AD07"
    AD08 = "AD08"
    AD09 = "AD09"
    AD10 = "AD10"
    AD11 = "AD11"
    AD12 = "AD12"
    AC01 = "AC01"
    AC02 = "AC02"
    AC03 = "AC03"
    AC04 = "AC04"
    AC05 = "AC05"
    AC06 = "AC06"
    AC07 = "AC07"
    AC08 = "AC08"
    AC09 = "AC09"
    AC10 = "AC10"
    AC11 = "AC11"
    TLDE = "TLDE"
    BKSL = "BKSL"
    AB01 = "AB01"
    AB02 = "AB02"
    AB03 = "AB03"
    AB04 = "AB04"
    AB05 = "AB05"
    AB06 = "AB06"
    AB07 = "AB07"
    AB08 = "AB08"
    AB09 = "AB09"
    AB10 = "AB10"
    SPCE = "SPCE"
    # On ISO keyboards
    LSGT = "LSGT"
    KPDL = "KPDL"

    @property
    def sort_index(self) -> int:
        return _KEY_ORDER[self]

    @classmethod
    def from_name(cls, name: str) -> "LinuxKey | None":
        try:
            return cls(name)
        except ValueError:
            return None


_KEY_ORDER = {key: index for index, key in enumerate(LinuxKey)}


@dataclass(frozen=True)
class CharOrDead:
    """One output slot: a literal character or a named dead key.

    The default value is the empty slot (U+0000, written as ``NoSymbol``).
    """

    char: str = EMPTY
    dead: str | None = None

    @classmethod
    def of(cls, char: str | None) -> "CharOrDead":
        return cls(char=EMPTY if char is None else char)

    @classmethod
    def dead_key(cls, name: str) -> "CharOrDead":
        return cls(dead=name)

    @classmethod
    def from_keysym(cls, name: str) -> "CharOrDead | None":
        """Build a slot from an XKB keysym name, or ``None`` if it is unknown."""
        if name.startswith(DEAD_PREFIX):
            return cls.dead_key(name[len(DEAD_PREFIX) :])
        char = name_to_char(name)
        if char is None:
            return None
        return cls(char=char)

    @property
    def is_dead(self) -> bool:
        return self.dead is not None

    @property
    def is_empty(self) -> bool:
        return self.dead is None and self.char == EMPTY

    def to_keysym(self) -> str:
        if self.dead is not None:
            return f"{DEAD_PREFIX}{self.dead}"
        return char_to_name(self.char)

    def __str__(self) -> str:
        return self.to_keysym()


EMPTY_SLOT = CharOrDead()


@dataclass(frozen=True)
class Output:
    """The four shift levels of a key: plain, Shift, AltGr and AltGr+Shift.

    ``a | b`` merges slot by slot, keeping ``a``'s slot unless it is empty.
    """

    normal: CharOrDead = EMPTY_SLOT
    shift: CharOrDead = EMPTY_SLOT
    altgr: CharOrDead = EMPTY_SLOT
    altgr_shift: CharOrDead = EMPTY_SLOT

    @classmethod
    def from_slots(cls, slots: Sequence[CharOrDead]) -> "Output":
        """Build an output from up to four slots, padding with empty ones.

        Raises:
            TooManyOutputSlotsError: If more than four slots are given
        """
        if len(slots) > MAX_OUTPUTS:
            raise TooManyOutputSlotsError(len(slots), MAX_OUTPUTS)
        padded = list(slots) + [EMPTY_SLOT] * (MAX_OUTPUTS - len(slots))
        return cls(*padded)

    @property
    def slots(self) -> tuple[CharOrDead, CharOrDead, CharOrDead, CharOrDead]:
        return (self.normal, self.shift, self.altgr, self.altgr_shift)

    @property
    def has_altgr(self) -> bool:
        return not (self.altgr.is_empty and self.altgr_shift.is_empty)

    def __or__(self, other: "Output") -> "Output":
        if not isinstance(other, Output):
            return NotImplemented
        return Output(
            *(
                mine if not mine.is_empty else theirs
                for mine, theirs in zip(self.slots, other.slots, strict=True)
            )
        )


class PartialXkbSymbols(KlayBaseModel):
    """One ``xkb_symbols "name" { ... };`` block."""

    name: str
    include: str | None = None
    name_group1: str | None = None
    keys: dict[LinuxKey, Output] = Field(default_factory=dict)

    def set_include(self, spec: str) -> bool:
        """Record an include spec; only the first one is kept."""
        if self.include is not None:
            return False
        self.include = spec
        return True

    def set_name_group1(self, name: str) -> bool:
        """Record the group 1 name; only the first one is kept."""
        if self.name_group1 is not None:
            return False
        self.name_group1 = name
        return True

    def sorted_keys(self) -> Iterator[tuple[LinuxKey, Output]]:
        for key in sorted(self.keys, key=lambda k: k.sort_index):
            yield key, self.keys[key]


class XkbLayout(KlayBaseModel):
    """A symbols file: one default block followed by named blocks."""

    default_partial: PartialXkbSymbols
    partials: list[PartialXkbSymbols] = Field(default_factory=list)

    def get_partial(self, name: str) -> PartialXkbSymbols | None:
        if self.default_partial.name == name:
            return self.default_partial
        for partial in self.partials:
            if partial.name == name:
                return partial
        return None

    def all_partials(self) -> list[PartialXkbSymbols]:
        return [self.default_partial, *self.partials]
