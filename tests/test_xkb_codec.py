"""Tests for reading and writing XKB symbols files."""

import pytest

from klay.core.errors import (
    DuplicateDefaultBlockError,
    MalformedSectionError,
    TooManyOutputSlotsError,
)
from klay.linux import (
    CharOrDead,
    LinuxKey,
    Output,
    PartialXkbSymbols,
    XkbLayout,
    format_output,
    format_symbols,
    parse_symbols,
    read_symbols,
    write_symbols,
)


class TestParseSymbols:
    """Parsing of the block structure and key lines."""

    def test_default_and_named_blocks(self, sample_symbols_text):
        layout = parse_symbols(sample_symbols_text)

        assert layout.default_partial.name == "basic"
        assert layout.default_partial.name_group1 == "Danish"
        assert [p.name for p in layout.partials] == ["nodeadkeys"]
        assert layout.partials[0].include == "dk(basic)"

    def test_key_levels(self, sample_symbols_text):
        keys = parse_symbols(sample_symbols_text).default_partial.keys

        assert keys[LinuxKey.AE01] == Output(
            normal=CharOrDead.of("1"),
            shift=CharOrDead.of("!"),
            altgr=CharOrDead.of("¹"),
            altgr_shift=CharOrDead.of("¡"),
        )
        assert keys[LinuxKey.AD01].altgr.is_empty

    def test_get_partial(self, sample_symbols_text):
        layout = parse_symbols(sample_symbols_text)
        assert layout.get_partial("basic") is layout.default_partial
        assert layout.get_partial("nodeadkeys") is layout.partials[0]
        assert layout.get_partial("missing") is None

    def test_declaration_and_header_on_one_line(self):
        layout = parse_symbols(
            'default partial alphanumeric_keys xkb_symbols "basic" {\n'
            "    key <AC01> { [ a, A ] };\n"
            "};\n"
        )
        assert layout.default_partial.keys[LinuxKey.AC01].shift == CharOrDead.of("A")

    def test_dead_keys(self):
        layout = parse_symbols(
            'default partial\nxkb_symbols "basic" {\n'
            "    key <AC11> { [ dead_acute, dead_diaeresis ] };\n"
            "};\n"
        )
        output = layout.default_partial.keys[LinuxKey.AC11]
        assert output.normal == CharOrDead.dead_key("acute")
        assert output.shift == CharOrDead.dead_key("diaeresis")

    def test_non_latin_keysyms(self):
        layout = parse_symbols(
            'default partial\nxkb_symbols "basic" {\n'
            "    key <AC01> { [ Cyrillic_ef, Cyrillic_EF ] };\n"
            "    key <AD01> { [ Greek_alpha, Greek_ALPHA ] };\n"
            "    key <AD02> { [ hebrew_aleph, Arabic_alef ] };\n"
            "};\n"
        )
        keys = layout.default_partial.keys
        assert set(keys) == {LinuxKey.AC01, LinuxKey.AD01, LinuxKey.AD02}
        assert keys[LinuxKey.AC01].normal == CharOrDead.of("ф")
        assert keys[LinuxKey.AD01].shift == CharOrDead.of("\u0391")
        assert keys[LinuxKey.AD02] == Output(
            normal=CharOrDead.of("א"), shift=CharOrDead.of("ا")
        )

    def test_key_type_before_levels(self):
        layout = parse_symbols(
            'default partial\nxkb_symbols "basic" {\n'
            '    key <AC01> { type[Group1]="FOUR_LEVEL", [ a, A, ae, AE ] };\n'
            "    key <AC02> { symbols[Group1]= [ s, S ] };\n"
            "};\n"
        )
        keys = layout.default_partial.keys
        assert keys[LinuxKey.AC01].altgr_shift == CharOrDead.of("Æ")
        assert keys[LinuxKey.AC02].shift == CharOrDead.of("S")

    def test_first_include_wins(self):
        layout = parse_symbols(
            'default partial\nxkb_symbols "basic" {\n'
            '    include "us(basic)"\n'
            '    include "dk(basic)"\n'
            "};\n"
        )
        assert layout.default_partial.include == "us(basic)"

    def test_unknown_lines_are_skipped(self):
        layout = parse_symbols(
            'default partial\nxkb_symbols "basic" {\n'
            "    modifier_map Mod3 { Caps_Lock };\n"
            "    key <RTRN> { [ Return ] };\n"
            "    key <AC01> { [ a, not_a_keysym ] };\n"
            "    key <AC02> { [ s, S ] };\n"
            "};\n"
        )
        assert list(layout.default_partial.keys) == [LinuxKey.AC02]

    def test_too_many_levels(self):
        with pytest.raises(TooManyOutputSlotsError) as exc_info:
            parse_symbols(
                'default partial\nxkb_symbols "basic" {\n'
                "    key <AC01> { [ a, A, b, B, c ] };\n"
                "};\n"
            )
        assert exc_info.value.context["line_number"] == 3

    def test_missing_default_block(self):
        with pytest.raises(MalformedSectionError):
            parse_symbols('partial\nxkb_symbols "basic" {\n};\n')

    def test_duplicate_default_block(self):
        text = 'default partial\nxkb_symbols "a" {\n};\ndefault partial\nxkb_symbols "b" {\n};\n'
        with pytest.raises(DuplicateDefaultBlockError) as exc_info:
            parse_symbols(text)
        assert exc_info.value.line_number == 4

    def test_missing_partial_keyword(self):
        with pytest.raises(MalformedSectionError):
            parse_symbols('xkb_symbols "basic" {\n};\n')

    def test_unclosed_block(self):
        with pytest.raises(MalformedSectionError):
            parse_symbols('default partial\nxkb_symbols "basic" {\n    key <AC01> { [ a ] };\n')


class TestFormatSymbols:
    """Serialization."""

    def test_altgr_levels_left_out_when_empty(self):
        output = Output(normal=CharOrDead.of("a"), shift=CharOrDead.of("A"))
        assert format_output(output) == "         a,          A"

    def test_altgr_levels_written(self):
        output = Output(
            normal=CharOrDead.of("a"),
            shift=CharOrDead.of("A"),
            altgr=CharOrDead.dead_key("acute"),
        )
        assert format_output(output).split(", ")[2:] == ["  dead_acute", "    NoSymbol"]

    def test_block_layout(self):
        partial = PartialXkbSymbols(
            name="basic", include="dk(basic)", name_group1="Test Layout"
        )
        partial.keys[LinuxKey.AC01] = Output(normal=CharOrDead.of("a"))
        partial.keys[LinuxKey.AE01] = Output(normal=CharOrDead.of("1"))

        text = format_symbols(XkbLayout(default_partial=partial))

        lines = text.splitlines()
        assert lines[0] == "default  partial alphanumeric_keys"
        assert lines[1] == 'xkb_symbols "basic" {'
        assert '    include "dk(basic)"' in lines
        assert '    name[Group1]="Test Layout";' in lines
        # Keys are written in keyboard order
        assert lines.index(next(line for line in lines if "<AE01>" in line)) < lines.index(
            next(line for line in lines if "<AC01>" in line)
        )
        assert text.endswith("};\n\n")

    def test_round_trip(self, sample_symbols_text):
        layout = parse_symbols(sample_symbols_text)
        assert parse_symbols(format_symbols(layout)) == layout

    def test_write_and_read(self, tmp_path, sample_symbols_text):
        layout = parse_symbols(sample_symbols_text)
        path = tmp_path / "dk"
        write_symbols(layout, path)
        assert read_symbols(path) == layout
