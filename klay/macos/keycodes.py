"""macOS virtual key codes for the alphanumeric block, by XKB key position."""

from types import MappingProxyType

from klay.linux.models import LinuxKey


MAC_KEY_CODES = MappingProxyType(
    {
        LinuxKey.TLDE: 0x32,
        LinuxKey.AE01: 0x12,
        LinuxKey.AE02: 0x13,
        LinuxKey.AE03: 0x14,
        LinuxKey.AE04: 0x15,
        LinuxKey.AE05: 0x17,
        LinuxKey.AE06: 0x16,
        LinuxKey.AE07: 0x1A,
        LinuxKey.AE08: 0x1C,
        LinuxKey.AE09: 0x19,
        LinuxKey.AE10: 0x1D,
        LinuxKey.AE11: 0x1B,
        LinuxKey.AE12: 0x18,
        LinuxKey.AD01: 0x0C,
        LinuxKey.AD02: 0x0D,
        LinuxKey.AD03: 0x0E,
        LinuxKey.AD04: 0x0F,
        LinuxKey.AD05: 0x11,
        LinuxKey.AD06: 0x10,
        LinuxKey.AD07: 0x20,
        LinuxKey.AD08: 0x22,
        LinuxKey.AD09: 0x1F,
        LinuxKey.AD10: 0x23,
        LinuxKey.AD11: 0x21,
        LinuxKey.AD12: 0x1E,
        LinuxKey.AC01: 0x00,
        LinuxKey.AC02: 0x01,
        LinuxKey.AC03: 0x02,
        LinuxKey.AC04: 0x03,
        LinuxKey.AC05: 0x05,
        LinuxKey.AC06: 0x04,
        LinuxKey.AC07: 0x26,
        LinuxKey.AC08: 0x28,
        LinuxKey.AC09: 0x25,
        LinuxKey.AC10: 0x29,
        LinuxKey.AC11: 0x27,
        LinuxKey.BKSL: 0x2A,
        LinuxKey.AB01: 0x06,
        LinuxKey.AB02: 0x07,
        LinuxKey.AB03: 0x08,
        LinuxKey.AB04: 0x09,
        LinuxKey.AB05: 0x0B,
        LinuxKey.AB06: 0x2D,
        LinuxKey.AB07: 0x2E,
        LinuxKey.AB08: 0x2B,
        LinuxKey.AB09: 0x2F,
        LinuxKey.AB10: 0x2C,
        LinuxKey.SPCE: 0x31,
        # ISO section key
        LinuxKey.LSGT: 0x0A,
        LinuxKey.KPDL: 0x41,
    }
)


def mac_key_code(key: LinuxKey) -> int:
    return MAC_KEY_CODES[key]
