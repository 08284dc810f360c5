"""Models for Windows KLC keyboard layouts."""

from enum import IntEnum, IntFlag

from pydantic import Field, field_validator

from klay.models.base import KlayBaseModel


ScanCode = int


class CapsLockBehaviour(IntFlag):
    """Effect of Caps Lock on a key (the ``Cap`` column)."""

    NEVER = 0
    SHIFT_ON_CAPS = 1
    SHIFT_ON_CAPS_ALT = 4
    SHIFT_ON_CAPS_ALWAYS = 5

    @classmethod
    def from_value(cls, value: int) -> "CapsLockBehaviour":
        """Look up a behaviour, rejecting values that are not defined.

        Raises:
            ValueError: If ``value`` is not 0, 1, 4 or 5
        """
        if value not in VALID_CAPS_VALUES:
            raise ValueError(f"No such caps lock behaviour: {value}")
        return cls(value)

    def __add__(self, other: int) -> "CapsLockBehaviour":  # type: ignore[override]
        return CapsLockBehaviour.from_value(int(self) + int(other))


# Iterating an IntFlag skips zero and multi-bit members
VALID_CAPS_VALUES = frozenset(
    int(member) for member in CapsLockBehaviour.__members__.values()
)


class ShiftState(IntEnum):
    """Columns of the fixed SHIFTSTATE table."""

    NORMAL = 0
    SHIFT = 1
    CTRL = 2
    CTRL_ALT = 6
    SHIFT_CTRL_ALT = 7

    @property
    def field_name(self) -> str:
        return self.name.lower()


class WinKey(KlayBaseModel):
    """One LAYOUT row.

    Absent outputs (``-1``) are ``None``. ``dead_states`` lists the columns
    whose character was marked as a dead key with a trailing ``@``.
    """

    virtual_key: str
    cap: CapsLockBehaviour = CapsLockBehaviour.NEVER
    normal: str | None = None
    shift: str | None = None
    ctrl: str | None = None
    ctrl_alt: str | None = None
    shift_ctrl_alt: str | None = None
    dead_states: frozenset[ShiftState] = frozenset()

    @field_validator("cap", mode="before")
    @classmethod
    def validate_cap(cls, v: object) -> CapsLockBehaviour:
        if isinstance(v, str):
            v = int(v)
        if not isinstance(v, int):
            raise ValueError(f"Invalid caps lock behaviour: {v!r}")
        return CapsLockBehaviour.from_value(int(v))

    def char(self, state: ShiftState) -> str | None:
        return getattr(self, state.field_name)  # type: ignore[no-any-return]

    def is_dead(self, state: ShiftState) -> bool:
        return state in self.dead_states


class WinKeyLayout(KlayBaseModel):
    """A parsed KLC document."""

    id: str = ""
    name: str = ""
    copyright: str = ""
    company: str = ""
    locale_name: str = ""
    locale_id: str = ""
    version: str = ""
    layout: dict[ScanCode, WinKey] = Field(default_factory=dict)
    # base character -> combining character -> composed result
    deadkeys: dict[str, dict[str, str]] = Field(default_factory=dict)
    key_names: dict[ScanCode, str] = Field(default_factory=dict)
    key_names_ext: dict[ScanCode, str] = Field(default_factory=dict)
    key_names_dead: dict[str, str] = Field(default_factory=dict)
    # locale id -> text
    descriptions: dict[str, str] = Field(default_factory=dict)
    language_names: dict[str, str] = Field(default_factory=dict)

    @property
    def dead_chars(self) -> list[str]:
        return list(self.deadkeys)
