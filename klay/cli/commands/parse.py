"""Parse command: read a layout file and show what was understood."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from klay.cli.decorators import handle_errors
from klay.cli.helpers.formats import LayoutFormat, detect_format
from klay.cli.helpers.theme import ThemedConsole, create_basic_table, get_themed_console
from klay.descriptor import Descriptor, read_descriptor
from klay.linux import XkbLayout, read_symbols
from klay.macos import KeyLayout, read_keylayout
from klay.models.base import KlayBaseModel
from klay.windows import ShiftState, WinKeyLayout, read_klc


logger = logging.getLogger(__name__)


def _char_cell(char: str | None, dead: bool = False) -> str:
    if char is None:
        return "-"
    text = char if char.isprintable() and not char.isspace() else f"U+{ord(char):04X}"
    return f"{text}@" if dead else text


def _show_klc(themed: ThemedConsole, layout: WinKeyLayout) -> None:
    themed.print_info(f'KLC layout {layout.id} "{layout.name}"')
    for label, value in (
        ("Copyright", layout.copyright),
        ("Company", layout.company),
        ("Locale", f"{layout.locale_name} ({layout.locale_id})"),
        ("Version", layout.version),
    ):
        themed.print_list_item(f"{label}: {value}")

    table = create_basic_table(f"{len(layout.layout)} keys")
    for column in ("SC", "VK", "Cap", *(str(int(state)) for state in ShiftState)):
        table.add_column(column)
    for scan_code in sorted(layout.layout):
        key = layout.layout[scan_code]
        table.add_row(
            f"{scan_code:02x}",
            key.virtual_key,
            str(int(key.cap)),
            *(_char_cell(key.char(state), key.is_dead(state)) for state in ShiftState),
        )
    themed.console.print(table)

    for base, compositions in layout.deadkeys.items():
        name = layout.key_names_dead.get(base, "")
        themed.print_list_item(
            f"Dead key {_char_cell(base)} {name}: {len(compositions)} compositions"
        )


def _show_xkb(themed: ThemedConsole, layout: XkbLayout) -> None:
    for index, partial in enumerate(layout.all_partials()):
        title = f'xkb_symbols "{partial.name}"' + (" (default)" if index == 0 else "")
        table = create_basic_table(title)
        for column in ("Key", "Normal", "Shift", "AltGr", "AltGr+Shift"):
            table.add_column(column)
        for key, output in partial.sorted_keys():
            table.add_row(key.value, *(slot.to_keysym() for slot in output.slots))
        if partial.include:
            themed.print_list_item(f"include {partial.include}")
        if partial.name_group1:
            themed.print_list_item(f"name {partial.name_group1}")
        themed.console.print(table)


def _show_keylayout(themed: ThemedConsole, layout: KeyLayout) -> None:
    themed.print_info(f'keylayout "{layout.name}" (id {layout.id}, group {layout.group})')
    for key_map in layout.key_map_set.key_maps:
        themed.print_list_item(f"keyMap {key_map.index}: {len(key_map.keys)} keys")
    themed.print_list_item(f"{len(layout.actions)} actions")
    themed.print_list_item(f"{len(layout.terminators)} terminators")


def _show_descriptor(themed: ThemedConsole, descriptor: Descriptor) -> None:
    themed.print_info(f'Descriptor "{descriptor.metadata.name}"')
    table = create_basic_table(f"{len(descriptor.keymap)} keys")
    for column in ("Key", "Normal", "Shift", "AltGr", "AltGr+Shift"):
        table.add_column(column)
    for key, outputs in descriptor.sorted_keymap():
        table.add_row(
            key.value,
            *(output if output in descriptor.special else _char_cell(output) for output in outputs),
        )
    themed.console.print(table)


def read_layout(path: Path) -> KlayBaseModel:
    """Read any supported layout file, choosing the parser by extension."""
    layout_format = detect_format(path)
    logger.debug("Reading %s as %s", path, layout_format.value)
    if layout_format is LayoutFormat.KLC:
        return read_klc(path)
    if layout_format is LayoutFormat.KEYLAYOUT:
        return read_keylayout(path)
    if layout_format is LayoutFormat.DESCRIPTOR:
        return read_descriptor(path)
    return read_symbols(path)


@handle_errors
def parse_command(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Layout file (.klc, .keylayout, .toml, anything else is XKB)",
            exists=True,
            dir_okay=False,
        ),
    ],
    json_output: Annotated[
        bool, typer.Option("--json", help="Print the parsed model as JSON")
    ] = False,
) -> None:
    """Parse a layout file and show its contents."""
    layout = read_layout(input_file)

    if json_output:
        typer.echo(layout.model_dump_json(indent=2))
        return

    themed = get_themed_console()
    if isinstance(layout, WinKeyLayout):
        _show_klc(themed, layout)
    elif isinstance(layout, KeyLayout):
        _show_keylayout(themed, layout)
    elif isinstance(layout, Descriptor):
        _show_descriptor(themed, layout)
    elif isinstance(layout, XkbLayout):
        _show_xkb(themed, layout)


def register_commands(app: typer.Typer) -> None:
    """Register the parse command with the main app."""
    app.command(name="parse")(parse_command)
