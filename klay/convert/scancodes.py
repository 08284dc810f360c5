"""Windows scan code <-> Linux key identifier table."""

from types import MappingProxyType

from klay.core.errors import UnsupportedScanCodeError
from klay.linux.models import LinuxKey


WIN_TO_LINUX = MappingProxyType(
    {
        0x02: LinuxKey.AE01,
        0x03: LinuxKey.AE02,
        0x04: LinuxKey.AE03,
        0x05: LinuxKey.AE04,
        0x06: LinuxKey.AE05,
        0x07: LinuxKey.AE06,
        0x08: LinuxKey.AE07,
        0x09: LinuxKey.AE08,
        0x0A: LinuxKey.AE09,
        0x0B: LinuxKey.AE10,
        0x0C: LinuxKey.AE11,
        0x0D: LinuxKey.AE12,
        0x10: LinuxKey.AD01,
        0x11: LinuxKey.AD02,
        0x12: LinuxKey.AD03,
        0x13: LinuxKey.AD04,
        0x14: LinuxKey.AD05,
        0x15: LinuxKey.AD06,
        0x16: LinuxKey.AD07,
        0x17: LinuxKey.AD08,
        0x18: LinuxKey.AD09,
        0x19: LinuxKey.AD10,
        0x1A: LinuxKey.AD11,
        0x1B: LinuxKey.AD12,
        0x1E: LinuxKey.AC01,
        0x1F: LinuxKey.AC02,
        0x20: LinuxKey.AC03,
        0x21: LinuxKey.AC04,
        0x22: LinuxKey.AC05,
        0x23: LinuxKey.AC06,
        0x24: LinuxKey.AC07,
        0x25: LinuxKey.AC08,
        0x26: LinuxKey.AC09,
        0x27: LinuxKey.AC10,
        0x28: LinuxKey.AC11,
        0x29: LinuxKey.TLDE,
        0x2B: LinuxKey.BKSL,
        0x2C: LinuxKey.AB01,
        0x2D: LinuxKey.AB02,
        0x2E: LinuxKey.AB03,
        0x2F: LinuxKey.AB04,
        0x30: LinuxKey.AB05,
        0x31: LinuxKey.AB06,
        0x32: LinuxKey.AB07,
        0x33: LinuxKey.AB08,
        0x34: LinuxKey.AB09,
        0x35: LinuxKey.AB10,
        0x39: LinuxKey.SPCE,
        0x56: LinuxKey.LSGT,
        0x53: LinuxKey.KPDL,
    }
)

LINUX_TO_WIN = MappingProxyType({key: code for code, key in WIN_TO_LINUX.items()})


def win_to_linux(scan_code: int) -> LinuxKey:
    """Map a Windows scan code to its Linux key identifier.

    Raises:
        UnsupportedScanCodeError: If the scan code has no Linux counterpart
    """
    try:
        return WIN_TO_LINUX[scan_code]
    except KeyError:
        raise UnsupportedScanCodeError(scan_code) from None


def linux_to_win(key: LinuxKey) -> int:
    """Map a Linux key identifier back to its Windows scan code."""
    return LINUX_TO_WIN[key]
