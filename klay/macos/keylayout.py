"""macOS ``.keylayout`` documents.

A keylayout is an XML document describing which character every key code
produces under each modifier combination. Dead keys are expressed as actions
that switch to a named state; the characters they combine with are actions
that output a different character in that state, and terminators give the
output when the state is left by any other key.
"""

import logging
import re
from pathlib import Path

from lxml import etree
from pydantic import Field

from klay.convert.scancodes import WIN_TO_LINUX
from klay.core.errors import MalformedSectionError
from klay.macos.keycodes import MAC_KEY_CODES
from klay.models.base import KlayBaseModel
from klay.windows.models import CapsLockBehaviour, ShiftState, WinKey, WinKeyLayout


logger = logging.getLogger(__name__)

DEFAULT_GROUP = 126
DEFAULT_ID = -19341
NO_STATE = "none"
DOCTYPE = (
    '<!DOCTYPE keyboard SYSTEM "file://localhost/System/Library/DTDs/KeyboardLayout.dtd">'
)
XML_DECLARATION = '<?xml version="1.1" encoding="UTF-8"?>'
COMMENT = " Created by klay "

# keyMapSelect index -> modifier key expressions
MODIFIER_MAP = (
    (0, ("", "command anyShift? caps?")),
    (1, ("caps",)),
    (2, ("anyShift caps?",)),
    (3, ("anyOption",)),
    (4, ("anyOption caps",)),
    (5, ("anyOption anyShift caps?",)),
    (6, ("command anyOption caps?",)),
    (7, ("command anyOption anyShift caps?",)),
    (8, ("control command? anyOption? anyShift? caps?",)),
)

CHAR_REF_RE = re.compile(r"&#x([0-9A-Fa-f]+);")
ESCAPED_REF_RE = re.compile(r"&amp;(#x[0-9A-F]+;)")
CONTROL_TOKEN_RE = re.compile(r"__klay_cc_([0-9A-F]{4})__")
DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>")


class LayoutRange(KlayBaseModel):
    first: int = 0
    last: int = 255
    map_set: str = "a"
    modifiers: str = "mods"


class KeyMapSelect(KlayBaseModel):
    map_index: int
    modifiers: list[str] = Field(default_factory=list)


class ModifierMap(KlayBaseModel):
    id: str = "mods"
    default_index: int = 0
    key_map_select: list[KeyMapSelect] = Field(default_factory=list)


class KeyEntry(KlayBaseModel):
    """A ``<key>``: either a direct output or a reference to an action."""

    code: int
    output: str | None = None
    action: str | None = None


class KeyMap(KlayBaseModel):
    index: int
    keys: list[KeyEntry] = Field(default_factory=list)

    def get(self, code: int) -> KeyEntry | None:
        for entry in self.keys:
            if entry.code == code:
                return entry
        return None


class KeyMapSet(KlayBaseModel):
    id: str = "a"
    key_maps: list[KeyMap] = Field(default_factory=list)


class When(KlayBaseModel):
    state: str = NO_STATE
    output: str | None = None
    next: str | None = None


class Action(KlayBaseModel):
    id: str
    whens: list[When] = Field(default_factory=list)


class KeyLayout(KlayBaseModel):
    """Top level ``<keyboard>`` element."""

    group: int = DEFAULT_GROUP
    id: int = DEFAULT_ID
    name: str = ""
    maxout: int = 1
    layouts: list[LayoutRange] = Field(default_factory=lambda: [LayoutRange()])
    modifier_map: ModifierMap = Field(default_factory=ModifierMap)
    key_map_set: KeyMapSet = Field(default_factory=KeyMapSet)
    actions: list[Action] = Field(default_factory=list)
    terminators: list[When] = Field(default_factory=list)

    def get_action(self, action_id: str) -> Action | None:
        for action in self.actions:
            if action.id == action_id:
                return action
        return None


def _caps_level(key: WinKey, base: ShiftState, shifted: ShiftState, flag: CapsLockBehaviour) -> ShiftState:
    return shifted if key.cap & flag else base


def _key_map_levels(key: WinKey) -> list[ShiftState]:
    """Shift state supplying each of the nine key maps."""
    return [
        ShiftState.NORMAL,
        _caps_level(key, ShiftState.NORMAL, ShiftState.SHIFT, CapsLockBehaviour.SHIFT_ON_CAPS),
        ShiftState.SHIFT,
        ShiftState.CTRL_ALT,
        _caps_level(
            key, ShiftState.CTRL_ALT, ShiftState.SHIFT_CTRL_ALT, CapsLockBehaviour.SHIFT_ON_CAPS_ALT
        ),
        ShiftState.SHIFT_CTRL_ALT,
        ShiftState.NORMAL,
        ShiftState.SHIFT,
        ShiftState.CTRL,
    ]


class _KeyLayoutBuilder:
    def __init__(self, win_layout: WinKeyLayout):
        self.win_layout = win_layout
        self.actions: dict[str, Action] = {}
        # combining char -> [(dead char, result)]
        self.compositions: dict[str, list[tuple[str, str]]] = {}
        for dead, table in win_layout.deadkeys.items():
            for combining, result in table.items():
                self.compositions.setdefault(combining, []).append((dead, result))

    def state_name(self, dead: str) -> str:
        name = self.win_layout.key_names_dead.get(dead)
        return name if name else f"dead {ord(dead):04x}"

    def entry(self, code: int, char: str, dead: bool) -> KeyEntry:
        if dead and char in self.win_layout.deadkeys:
            action_id = f"dead {ord(char):04x}"
            if action_id not in self.actions:
                self.actions[action_id] = Action(
                    id=action_id, whens=[When(next=self.state_name(char))]
                )
            return KeyEntry(code=code, action=action_id)

        if char in self.compositions:
            action_id = f"char {ord(char):04x}"
            if action_id not in self.actions:
                whens = [When(output=char)]
                whens.extend(
                    When(state=self.state_name(dead_char), output=result)
                    for dead_char, result in self.compositions[char]
                )
                self.actions[action_id] = Action(id=action_id, whens=whens)
            return KeyEntry(code=code, action=action_id)

        return KeyEntry(code=code, output=char)

    def build(self, keyboard_id: int, group: int) -> KeyLayout:
        key_maps = [KeyMap(index=index) for index, _modifiers in MODIFIER_MAP]
        for scan_code, win_key in self.win_layout.layout.items():
            linux_key = WIN_TO_LINUX.get(scan_code)
            if linux_key is None:
                logger.warning("No macOS key for scan code %02x, skipped", scan_code)
                continue
            code = MAC_KEY_CODES[linux_key]
            for key_map, state in zip(key_maps, _key_map_levels(win_key), strict=True):
                char = win_key.char(state)
                if char is None:
                    continue
                key_map.keys.append(self.entry(code, char, win_key.is_dead(state)))

        for key_map in key_maps:
            key_map.keys.sort(key=lambda entry: entry.code)

        terminators = [
            When(state=self.state_name(dead), output=dead)
            for dead in self.win_layout.deadkeys
        ]
        return KeyLayout(
            group=group,
            id=keyboard_id,
            name=self.win_layout.name,
            modifier_map=ModifierMap(
                key_map_select=[
                    KeyMapSelect(map_index=index, modifiers=list(modifiers))
                    for index, modifiers in MODIFIER_MAP
                ]
            ),
            key_map_set=KeyMapSet(key_maps=key_maps),
            actions=list(self.actions.values()),
            terminators=terminators,
        )


def build_keylayout(
    win_layout: WinKeyLayout, keyboard_id: int = DEFAULT_ID, group: int = DEFAULT_GROUP
) -> KeyLayout:
    """Build a keylayout from a Windows layout.

    Keys are placed through their XKB position; scan codes without a macOS
    key code are skipped with a warning.
    """
    keylayout = _KeyLayoutBuilder(win_layout).build(keyboard_id, group)
    logger.debug(
        "Built keylayout %r with %d actions", keylayout.name, len(keylayout.actions)
    )
    return keylayout


def escape_text(value: str) -> str:
    """Render characters outside printable ASCII, and XML specials, as ``&#xHHHH;``."""
    out = []
    for char in value:
        codepoint = ord(char)
        if 0x20 <= codepoint <= 0x7E and char not in '&<>"':
            out.append(char)
        else:
            out.append(f"&#x{codepoint:04X};")
    return "".join(out)


def _element(tag: str, **attributes: str | None) -> etree._Element:
    # lxml rejects control characters, so values are escaped before they reach it
    return etree.Element(
        tag,
        {
            name: escape_text(value)
            for name, value in attributes.items()
            if value is not None
        },
    )


def _sub_element(
    parent: etree._Element, tag: str, **attributes: str | None
) -> etree._Element:
    element = _element(tag, **attributes)
    parent.append(element)
    return element


def _when_element(parent: etree._Element, when: When) -> None:
    _sub_element(parent, "when", state=when.state, output=when.output, next=when.next)


def to_element(keylayout: KeyLayout) -> etree._Element:
    """Build the ``<keyboard>`` tree; attribute values are already escaped."""
    keyboard = _element(
        "keyboard",
        group=str(keylayout.group),
        id=str(keylayout.id),
        name=keylayout.name,
        maxout=str(keylayout.maxout),
    )
    keyboard.append(etree.Comment(COMMENT))

    layouts = _sub_element(keyboard, "layouts")
    for layout in keylayout.layouts:
        _sub_element(
            layouts,
            "layout",
            first=str(layout.first),
            last=str(layout.last),
            mapSet=layout.map_set,
            modifiers=layout.modifiers,
        )

    modifier_map = _sub_element(
        keyboard,
        "modifierMap",
        id=keylayout.modifier_map.id,
        defaultIndex=str(keylayout.modifier_map.default_index),
    )
    for select in keylayout.modifier_map.key_map_select:
        select_element = _sub_element(
            modifier_map, "keyMapSelect", mapIndex=str(select.map_index)
        )
        for keys in select.modifiers:
            _sub_element(select_element, "modifier", keys=keys)

    key_map_set = _sub_element(keyboard, "keyMapSet", id=keylayout.key_map_set.id)
    for key_map in keylayout.key_map_set.key_maps:
        key_map_element = _sub_element(key_map_set, "keyMap", index=str(key_map.index))
        for entry in key_map.keys:
            _sub_element(
                key_map_element,
                "key",
                code=str(entry.code),
                output=entry.output,
                action=entry.action,
            )

    if keylayout.actions:
        actions = _sub_element(keyboard, "actions")
        for action in keylayout.actions:
            action_element = _sub_element(actions, "action", id=action.id)
            for when in action.whens:
                _when_element(action_element, when)

    if keylayout.terminators:
        terminators = _sub_element(keyboard, "terminators")
        for when in keylayout.terminators:
            _when_element(terminators, when)

    return keyboard


def format_keylayout(keylayout: KeyLayout) -> str:
    """Serialize a keylayout to XML 1.1 text."""
    body = etree.tostring(to_element(keylayout), pretty_print=True, encoding="unicode")
    # Values already hold character references; undo lxml's escaping of the '&'
    body = ESCAPED_REF_RE.sub(r"&\1", body)
    return f"{XML_DECLARATION}\n{DOCTYPE}\n{body}"


def write_keylayout(keylayout: KeyLayout, path: Path) -> None:
    path.write_text(format_keylayout(keylayout), encoding="utf-8")
    logger.debug("Wrote keylayout %r to %s", keylayout.name, path)


def _protect_control_refs(text: str) -> str:
    # libxml2 only speaks XML 1.0, which forbids references to control characters
    def replace(match: re.Match[str]) -> str:
        value = int(match.group(1), 16)
        if value < 0x20 and value not in (0x09, 0x0A, 0x0D):
            return f"__klay_cc_{value:04X}__"
        return match.group(0)

    return CHAR_REF_RE.sub(replace, DECLARATION_RE.sub("", text, count=1))


def _attr(element: etree._Element, name: str, default: str | None = None) -> str | None:
    value = element.get(name)
    if value is None:
        return default
    return CONTROL_TOKEN_RE.sub(lambda m: chr(int(m.group(1), 16)), value)


def _required(element: etree._Element, name: str) -> str:
    value = _attr(element, name)
    if value is None:
        raise MalformedSectionError(
            f"<{element.tag}> is missing the {name!r} attribute", element.sourceline
        )
    return value


def _int_attr(element: etree._Element, name: str) -> int:
    value = _required(element, name)
    try:
        return int(value)
    except ValueError as e:
        raise MalformedSectionError(
            f"<{element.tag}> attribute {name!r} is not a number: {value!r}",
            element.sourceline,
        ) from e


def _read_when(element: etree._Element) -> When:
    return When(
        state=_attr(element, "state", NO_STATE) or NO_STATE,
        output=_attr(element, "output"),
        next=_attr(element, "next"),
    )


def parse_keylayout(text: str) -> KeyLayout:
    """Parse keylayout XML text.

    Raises:
        MalformedSectionError: If the document is not a well formed keylayout
    """
    parser = etree.XMLParser(
        load_dtd=False, no_network=True, resolve_entities=False, remove_comments=True
    )
    try:
        root = etree.fromstring(_protect_control_refs(text), parser)
    except etree.XMLSyntaxError as e:
        raise MalformedSectionError(f"Invalid keylayout XML: {e}", e.lineno) from e

    if root.tag != "keyboard":
        raise MalformedSectionError(f"Expected <keyboard>, got <{root.tag}>", root.sourceline)

    layouts = [
        LayoutRange(
            first=_int_attr(element, "first"),
            last=_int_attr(element, "last"),
            map_set=_required(element, "mapSet"),
            modifiers=_required(element, "modifiers"),
        )
        for element in root.iterfind("layouts/layout")
    ]

    modifier_map = ModifierMap()
    modifier_element = root.find("modifierMap")
    if modifier_element is not None:
        modifier_map = ModifierMap(
            id=_required(modifier_element, "id"),
            default_index=_int_attr(modifier_element, "defaultIndex"),
            key_map_select=[
                KeyMapSelect(
                    map_index=_int_attr(select, "mapIndex"),
                    modifiers=[
                        _attr(modifier, "keys", "") or ""
                        for modifier in select.iterfind("modifier")
                    ],
                )
                for select in modifier_element.iterfind("keyMapSelect")
            ],
        )

    key_map_set = KeyMapSet()
    key_map_set_element = root.find("keyMapSet")
    if key_map_set_element is not None:
        key_map_set = KeyMapSet(
            id=_required(key_map_set_element, "id"),
            key_maps=[
                KeyMap(
                    index=_int_attr(key_map, "index"),
                    keys=[
                        KeyEntry(
                            code=_int_attr(key, "code"),
                            output=_attr(key, "output"),
                            action=_attr(key, "action"),
                        )
                        for key in key_map.iterfind("key")
                    ],
                )
                for key_map in key_map_set_element.iterfind("keyMap")
            ],
        )

    actions = [
        Action(
            id=_required(action, "id"),
            whens=[_read_when(when) for when in action.iterfind("when")],
        )
        for action in root.iterfind("actions/action")
    ]
    terminators = [_read_when(when) for when in root.iterfind("terminators/when")]

    return KeyLayout(
        group=_int_attr(root, "group"),
        id=_int_attr(root, "id"),
        name=_attr(root, "name", "") or "",
        maxout=int(_attr(root, "maxout", "1") or "1"),
        layouts=layouts,
        modifier_map=modifier_map,
        key_map_set=key_map_set,
        actions=actions,
        terminators=terminators,
    )


def read_keylayout(path: Path) -> KeyLayout:
    """Read and parse a keylayout file."""
    return parse_keylayout(path.read_text(encoding="utf-8"))
