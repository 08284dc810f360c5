"""Windows -> Linux layout conversion."""

from klay.convert.dead_keys import DeadKeyResolverProtocol, MappingDeadKeyResolver
from klay.convert.loader import SymbolsFileLoader
from klay.convert.scancodes import win_to_linux
from klay.core.errors import IncludeCycleError, PartialNotFoundError
from klay.core.structlog_logger import get_struct_logger
from klay.linux.models import CharOrDead, LinuxKey, Output, PartialXkbSymbols, XkbLayout
from klay.windows.models import WinKey, WinKeyLayout


logger = get_struct_logger(__name__)

DEFAULT_PARTIAL = "basic"
DEFAULT_INCLUDE = "dk(basic)"

KeyTable = dict[LinuxKey, Output]


def split_include_spec(spec: str) -> tuple[str, str]:
    """Split ``file(partial)`` into its file and block names.

    A spec without parentheses names the ``basic`` block of the file.
    """
    start = spec.find("(")
    if start < 0:
        return spec, DEFAULT_PARTIAL
    end = spec.rfind(")")
    if end < start:
        end = len(spec)
    return spec[:start], spec[start + 1 : end]


class XkbConversionService:
    """Resolves include chains and converts Windows layouts to XKB symbols."""

    def __init__(
        self,
        loader: SymbolsFileLoader,
        dead_key_resolver: DeadKeyResolverProtocol,
        include: str | None = DEFAULT_INCLUDE,
    ):
        self.loader = loader
        self.dead_key_resolver = dead_key_resolver
        self.include = include or None

    def resolve_defaults(self, spec: str) -> KeyTable:
        """Flatten an include chain into one key table.

        Each block's own keys are merged over what its include resolves to.

        Raises:
            PartialNotFoundError: If a file or block in the chain is missing
            IncludeCycleError: If the chain includes a block twice
        """
        return self._resolve(spec, [])

    def _resolve(self, spec: str, chain: list[str]) -> KeyTable:
        file_name, partial_name = split_include_spec(spec)
        ident = f"{file_name}({partial_name})"
        if ident in chain:
            raise IncludeCycleError([*chain, ident])

        partial = self.loader.load(file_name).get_partial(partial_name)
        if partial is None:
            raise PartialNotFoundError(
                f"Symbols block {partial_name!r} not found in {file_name!r}",
                {"file": file_name, "partial": partial_name},
            )

        if partial.include is None:
            table: KeyTable = {}
        else:
            table = self._resolve(partial.include, [*chain, ident])

        for key, output in partial.keys.items():
            base = table.get(key)
            table[key] = output if base is None else output | base

        logger.debug("resolved_include", spec=ident, keys=len(table))
        return table

    def convert_key(self, win_key: WinKey, dead_chars: set[str]) -> Output:
        """Map a Windows key's normal, Shift and AltGr levels to an Output.

        The Ctrl level has no XKB counterpart and is dropped.
        """
        return Output(
            normal=self._char_or_dead(win_key.normal, dead_chars),
            shift=self._char_or_dead(win_key.shift, dead_chars),
            altgr=self._char_or_dead(win_key.ctrl_alt, dead_chars),
            altgr_shift=self._char_or_dead(win_key.shift_ctrl_alt, dead_chars),
        )

    def _char_or_dead(self, char: str | None, dead_chars: set[str]) -> CharOrDead:
        if char is None or char not in dead_chars:
            return CharOrDead.of(char)
        name = self.dead_key_resolver.resolve(char)
        if name is None:
            return CharOrDead.of(char)
        return CharOrDead.dead_key(name)

    def convert(self, win_layout: WinKeyLayout) -> XkbLayout:
        """Convert a Windows layout into a single-block symbols file.

        Keys that match the included baseline after merging are left out.

        Raises:
            UnsupportedScanCodeError: If a scan code has no Linux key
            PartialNotFoundError: If the include cannot be resolved
            IncludeCycleError: If the include chain is cyclic
        """
        partial = PartialXkbSymbols(
            name=DEFAULT_PARTIAL,
            include=self.include,
            name_group1=win_layout.name,
        )
        baseline = self.resolve_defaults(self.include) if self.include else {}
        dead_chars = set(win_layout.deadkeys)

        skipped = 0
        for scan_code, win_key in win_layout.layout.items():
            key = win_to_linux(scan_code)
            output = self.convert_key(win_key, dead_chars)

            default = baseline.get(key)
            if default is not None:
                output = output | default
                if output == default:
                    skipped += 1
                    continue

            partial.keys[key] = output

        logger.info(
            "layout_converted",
            layout=win_layout.id,
            keys=len(partial.keys),
            unchanged=skipped,
            include=self.include,
        )
        return XkbLayout(default_partial=partial)


def create_conversion_service(
    loader: SymbolsFileLoader | None = None,
    dead_key_resolver: DeadKeyResolverProtocol | None = None,
    include: str | None = DEFAULT_INCLUDE,
) -> XkbConversionService:
    """Create an XkbConversionService.

    Without a resolver every dead-key character is kept literal.
    """
    return XkbConversionService(
        loader=loader or SymbolsFileLoader(),
        dead_key_resolver=dead_key_resolver or MappingDeadKeyResolver(),
        include=include,
    )
