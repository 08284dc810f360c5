"""Shared model building blocks."""

from .base import KlayBaseModel


__all__ = ["KlayBaseModel"]
