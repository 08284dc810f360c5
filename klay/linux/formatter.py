"""Serialization of XKB symbols files."""

import logging
from pathlib import Path

from klay.linux.models import Output, PartialXkbSymbols, XkbLayout


logger = logging.getLogger(__name__)


def format_output(output: Output) -> str:
    """Format the bracketed level list of a key.

    The AltGr levels are left out when both are empty.
    """
    text = f"{output.normal.to_keysym():>10}, {output.shift.to_keysym():>10}"
    if output.has_altgr:
        text += f", {output.altgr.to_keysym():>12}, {output.altgr_shift.to_keysym():>12}"
    return text


def format_partial(partial: PartialXkbSymbols) -> str:
    """Format one symbols block, without a trailing newline."""
    lines = ["partial alphanumeric_keys", f'xkb_symbols "{partial.name}" {{', ""]

    if partial.include is not None:
        lines.extend([f'    include "{partial.include}"', ""])
    if partial.name_group1 is not None:
        lines.extend([f'    name[Group1]="{partial.name_group1}";', ""])

    for key, output in partial.sorted_keys():
        lines.append(f"    key <{key.value}>\t{{ [{format_output(output)}]\t}};")

    lines.append("};")
    return "\n".join(lines)


def format_symbols(layout: XkbLayout) -> str:
    """Format a whole symbols file, default block first."""
    parts = [f"default  {format_partial(layout.default_partial)}\n\n"]
    parts.extend(f"{format_partial(partial)}\n\n" for partial in layout.partials)
    return "".join(parts)


def write_symbols(layout: XkbLayout, path: Path) -> None:
    """Write a symbols file to ``path``."""
    path.write_text(format_symbols(layout), encoding="utf-8")
    logger.debug("Wrote %d symbols blocks to %s", len(layout.partials) + 1, path)
