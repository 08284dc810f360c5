"""Resolution of Windows dead-key characters to XKB dead key names."""

import logging
from collections.abc import Callable, Mapping
from typing import Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DeadKeyResolverProtocol(Protocol):
    """Decides which XKB dead key a Windows dead-key character becomes."""

    def resolve(self, char: str) -> str | None:
        """Return the dead key name (without ``dead_``) for ``char``.

        Returns:
            The name, or ``None`` to emit ``char`` as a literal character
        """
        ...


class MappingDeadKeyResolver:
    """Resolves dead keys from a fixed character -> name mapping."""

    def __init__(self, names: Mapping[str, str] | None = None):
        self._names = dict(names or {})

    def resolve(self, char: str) -> str | None:
        name = self._names.get(char)
        if name is None:
            logger.debug("No dead key name for %r, keeping literal", char)
        return name


class PromptDeadKeyResolver:
    """Asks for a dead key name through a prompt callable.

    An empty answer keeps the character literal.
    """

    def __init__(self, prompt: Callable[[str], str]):
        self._prompt = prompt

    def resolve(self, char: str) -> str | None:
        answer = self._prompt(char).strip()
        if answer.startswith("dead_"):
            answer = answer[len("dead_") :]
        return answer or None


class MemoizingDeadKeyResolver:
    """Wraps another resolver so each character is resolved only once."""

    def __init__(self, inner: DeadKeyResolverProtocol):
        self._inner = inner
        self._cache: dict[str, str | None] = {}

    def resolve(self, char: str) -> str | None:
        if char not in self._cache:
            self._cache[char] = self._inner.resolve(char)
        return self._cache[char]


class ChainedDeadKeyResolver:
    """Tries resolvers in order, returning the first name found."""

    def __init__(self, *resolvers: DeadKeyResolverProtocol):
        self._resolvers = resolvers

    def resolve(self, char: str) -> str | None:
        for resolver in self._resolvers:
            name = resolver.resolve(char)
            if name is not None:
                return name
        return None


def parse_dead_key_names(entries: Mapping[str, str]) -> dict[str, str]:
    """Turn ``{"00b4": "acute"}`` style config entries into ``{"´": "acute"}``.

    Keys are hex code points, with or without a ``U+``/``0x`` prefix, or a
    single literal character.

    Raises:
        ValueError: If a key is not a valid code point
    """
    names = {}
    for key, name in entries.items():
        names[parse_code_point(key)] = name.removeprefix("dead_")
    return names


def parse_code_point(text: str) -> str:
    if len(text) == 1:
        return text
    digits = text
    for prefix in ("U+", "u+", "0x", "0X", "U", "u"):
        if digits.startswith(prefix):
            digits = digits[len(prefix) :]
            break
    value = int(digits, 16)
    if not 0 <= value <= 0x10FFFF:
        raise ValueError(f"Code point out of range: {text}")
    return chr(value)
