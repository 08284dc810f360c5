"""Conversions between descriptors and XKB symbols blocks."""

import logging

from klay.descriptor.models import DeadKeySpecial, Descriptor, KeyboardKey, Metadata
from klay.linux.keysyms import EMPTY, char_to_name, name_to_char
from klay.linux.models import CharOrDead, Output, PartialXkbSymbols, XkbLayout


logger = logging.getLogger(__name__)


def descriptor_from_xkb(
    partial: PartialXkbSymbols, metadata: Metadata | None = None
) -> Descriptor:
    """Describe the keys of one symbols block.

    Dead keys become ``[special]`` entries named after the dead key and
    showing the character of the keysym with the same name.
    """
    if metadata is None:
        metadata = Metadata(name=partial.name_group1 or partial.name)

    keymap: dict[KeyboardKey, list[str]] = {}
    special: dict[str, DeadKeySpecial] = {}
    for key, output in partial.sorted_keys():
        outputs = []
        for slot in output.slots:
            if slot.dead is None:
                outputs.append(slot.char)
                continue
            char = name_to_char(slot.dead)
            if char is None or len(slot.dead) < 2:
                logger.warning(
                    "No character for dead key %r on <%s>, left empty", slot.dead, key.value
                )
                outputs.append(EMPTY)
                continue
            special[slot.dead] = DeadKeySpecial(deadkey=char)
            outputs.append(slot.dead)
        keymap[KeyboardKey.from_linux(key)] = outputs

    return Descriptor(metadata=metadata, keymap=keymap, special=special)


def descriptor_to_xkb(descriptor: Descriptor, name: str = "basic") -> XkbLayout:
    """Build a single-block symbols file from a descriptor."""
    partial = PartialXkbSymbols(
        name=name, name_group1=descriptor.metadata.name or None
    )
    for key, outputs in descriptor.sorted_keymap():
        slots = []
        for output in outputs:
            special = descriptor.special.get(output)
            if special is None:
                slots.append(CharOrDead.of(output))
            else:
                slots.append(CharOrDead.dead_key(char_to_name(special.deadkey)))
        partial.keys[key.to_linux()] = Output.from_slots(slots)

    return XkbLayout(default_partial=partial)
