"""Lookup and caching of XKB symbols files named by include specs."""

import logging
from collections.abc import Sequence
from pathlib import Path

from klay.core.errors import PartialNotFoundError
from klay.linux.models import XkbLayout
from klay.linux.parser import read_symbols


logger = logging.getLogger(__name__)


class SymbolsFileLoader:
    """Finds symbols files in a list of directories and parses each one once."""

    def __init__(self, search_paths: Sequence[Path] | None = None):
        if search_paths is None:
            search_paths = [Path.cwd()]
        self.search_paths = [Path(p) for p in search_paths]
        self._cache: dict[str, XkbLayout] = {}

    def find(self, file_name: str) -> Path | None:
        """Locate ``file_name``, trying it as an absolute path first."""
        candidate = Path(file_name).expanduser()
        if candidate.is_absolute():
            return candidate if candidate.is_file() else None
        for directory in self.search_paths:
            path = directory / candidate
            if path.is_file():
                return path
        return None

    def load(self, file_name: str) -> XkbLayout:
        """Load and parse a symbols file by name.

        Raises:
            PartialNotFoundError: If no search path contains the file
        """
        if file_name in self._cache:
            return self._cache[file_name]

        path = self.find(file_name)
        if path is None:
            searched = ", ".join(str(p) for p in self.search_paths)
            raise PartialNotFoundError(
                f"Symbols file {file_name!r} not found (searched: {searched})",
                {"file": file_name},
            )

        logger.debug("Loading symbols file %s", path)
        layout = read_symbols(path)
        self._cache[file_name] = layout
        return layout

    def add(self, file_name: str, layout: XkbLayout) -> None:
        """Register an already parsed layout under ``file_name``."""
        self._cache[file_name] = layout

    def clear(self) -> None:
        self._cache.clear()
