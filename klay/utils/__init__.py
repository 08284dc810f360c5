"""Utility modules for klay."""

from klay.utils.utf16 import ByteOrder, Utf16Reader, detect, encode_utf16


__all__ = ["ByteOrder", "Utf16Reader", "detect", "encode_utf16"]
