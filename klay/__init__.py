"""klay - keyboard layout translator."""

from importlib.metadata import distribution

from .descriptor.models import Descriptor
from .linux.models import XkbLayout
from .macos.keylayout import KeyLayout
from .windows.models import WinKeyLayout


__version__ = distribution(__package__ or "klay").version

__all__ = [
    "Descriptor",
    "KeyLayout",
    "WinKeyLayout",
    "XkbLayout",
    "__version__",
]

# Import CLI after setting __version__ to avoid circular imports
from .cli import app, main


__all__ += ["app", "main"]
