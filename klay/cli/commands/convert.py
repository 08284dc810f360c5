"""Convert command: translate a layout file into another format."""

import sys
from pathlib import Path
from typing import Annotated

import typer

from klay.cli.decorators import handle_errors
from klay.cli.helpers.context import get_user_config_from_context
from klay.cli.helpers.formats import LayoutFormat, detect_format
from klay.cli.helpers.theme import get_themed_console
from klay.config.models import UserConfigData
from klay.convert import (
    ChainedDeadKeyResolver,
    DeadKeyResolverProtocol,
    MappingDeadKeyResolver,
    MemoizingDeadKeyResolver,
    PromptDeadKeyResolver,
    SymbolsFileLoader,
    create_conversion_service,
    parse_dead_key_names,
)
from klay.core.errors import ConfigError, ConversionError
from klay.core.structlog_logger import get_struct_logger
from klay.descriptor import (
    descriptor_from_xkb,
    descriptor_to_xkb,
    format_descriptor,
    read_descriptor,
)
from klay.linux import XkbLayout, format_symbols, read_symbols
from klay.macos import build_keylayout, format_keylayout
from klay.windows import WinKeyLayout, read_klc, write_klc


logger = get_struct_logger(__name__)


def _prompt_dead_key(char: str) -> str:
    typer.echo(f"Dead key `{char}' (U+{ord(char):04X}) detected.", err=True)
    answer: str = typer.prompt(
        "X11 dead key name (leave empty to keep the character) dead_",
        default="",
        show_default=False,
        err=True,
    )
    return answer


def build_dead_key_resolver(
    config: UserConfigData, dead_keys: list[str], prompt: bool
) -> DeadKeyResolverProtocol:
    """Combine configured and command line dead key names, prompting for the rest."""
    entries = dict(config.dead_key_names)
    for entry in dead_keys:
        code, sep, name = entry.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(
                f"Expected HEX=NAME, got {entry!r}", param_hint="--dead-key"
            )
        entries[code.strip()] = name.strip()

    try:
        names = parse_dead_key_names(entries)
    except ValueError as e:
        raise ConfigError(f"Invalid dead key code point: {e}") from e

    resolver: DeadKeyResolverProtocol = MappingDeadKeyResolver(names)
    if prompt:
        resolver = ChainedDeadKeyResolver(resolver, PromptDeadKeyResolver(_prompt_dead_key))
    return MemoizingDeadKeyResolver(resolver)


def _xkb_from_klc(
    win_layout: WinKeyLayout,
    config: UserConfigData,
    include: str | None,
    symbols_dirs: list[Path],
    resolver: DeadKeyResolverProtocol,
) -> XkbLayout:
    loader = SymbolsFileLoader([*symbols_dirs, *config.xkb_symbols_paths])
    service = create_conversion_service(
        loader=loader, dead_key_resolver=resolver, include=include
    )
    return service.convert(win_layout)


def _default_output(input_file: Path, source: LayoutFormat) -> Path | None:
    if source is LayoutFormat.KLC:
        return input_file.with_suffix("")
    return None


@handle_errors
def convert_command(
    ctx: typer.Context,
    input_file: Annotated[
        Path,
        typer.Argument(help="Layout to convert", exists=True, dir_okay=False),
    ],
    output_file: Annotated[
        Path | None,
        typer.Argument(
            help="Output file; its extension selects the format. "
            "KLC input defaults to the input name without extension, "
            "other input is printed."
        ),
    ] = None,
    dead_key: Annotated[
        list[str] | None,
        typer.Option(
            "--dead-key",
            help="Dead key name for a code point, e.g. 00b4=acute (repeatable)",
        ),
    ] = None,
    include: Annotated[
        str | None,
        typer.Option(
            "--include",
            help="Symbols block to include and compare against; empty for none",
        ),
    ] = None,
    symbols_dir: Annotated[
        list[Path] | None,
        typer.Option(
            "--symbols-dir",
            help="Directory searched for included symbols files (repeatable)",
            file_okay=False,
        ),
    ] = None,
    no_prompt: Annotated[
        bool,
        typer.Option("--no-prompt", help="Never ask for dead key names"),
    ] = False,
) -> None:
    """Convert a layout between KLC, XKB symbols, keylayout and TOML formats."""
    config = get_user_config_from_context(ctx)
    source = detect_format(input_file)
    if output_file is None:
        output_file = _default_output(input_file, source)
    target = detect_format(output_file) if output_file else LayoutFormat.XKB

    log = logger.bind(input=str(input_file), source=source.value, target=target.value)
    log.info("conversion_started")

    if source is LayoutFormat.KLC:
        win_layout = read_klc(input_file)
        if target is LayoutFormat.KLC:
            if output_file is None:
                raise ConversionError("KLC output needs an output file")
            write_klc(win_layout, output_file)
            log.info("conversion_finished", output=str(output_file))
            get_themed_console().print_success(f"Wrote {output_file}")
            return
        if target is LayoutFormat.KEYLAYOUT:
            text = format_keylayout(
                build_keylayout(
                    win_layout,
                    keyboard_id=config.keylayout_id,
                    group=config.keylayout_group,
                )
            )
        elif target in (LayoutFormat.XKB, LayoutFormat.DESCRIPTOR):
            prompt = not no_prompt and sys.stdin.isatty()
            resolver = build_dead_key_resolver(config, dead_key or [], prompt)
            if target is LayoutFormat.DESCRIPTOR:
                # A descriptor lists every key, so nothing is included
                chosen_include = None
            else:
                chosen_include = config.default_include if include is None else include
            xkb = _xkb_from_klc(
                win_layout, config, chosen_include or None, symbols_dir or [], resolver
            )
            if target is LayoutFormat.DESCRIPTOR:
                text = format_descriptor(descriptor_from_xkb(xkb.default_partial))
            else:
                text = format_symbols(xkb)
        else:
            raise ConversionError(f"Cannot convert KLC to {target.value}")
    elif source is LayoutFormat.XKB:
        xkb = read_symbols(input_file)
        if target is LayoutFormat.XKB:
            text = format_symbols(xkb)
        elif target is LayoutFormat.DESCRIPTOR:
            text = format_descriptor(descriptor_from_xkb(xkb.default_partial))
        else:
            raise ConversionError(f"Cannot convert XKB symbols to {target.value}")
    elif source is LayoutFormat.DESCRIPTOR:
        descriptor = read_descriptor(input_file)
        if target is LayoutFormat.XKB:
            text = format_symbols(descriptor_to_xkb(descriptor))
        elif target is LayoutFormat.DESCRIPTOR:
            text = format_descriptor(descriptor)
        else:
            raise ConversionError(f"Cannot convert a descriptor to {target.value}")
    else:
        raise ConversionError(f"Cannot convert from {source.value}")

    if output_file is None:
        typer.echo(text, nl=False)
        return

    output_file.write_text(text, encoding="utf-8")
    log.info("conversion_finished", output=str(output_file))
    get_themed_console().print_success(f"Wrote {output_file}")


def register_commands(app: typer.Typer) -> None:
    """Register the convert command with the main app."""
    app.command(name="convert")(convert_command)
