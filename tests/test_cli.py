"""Tests for the klay command line."""

import json

import pytest
import typer

from klay.cli import app
from klay.cli.commands import register_all_commands
from klay.cli.commands.convert import build_dead_key_resolver
from klay.cli.commands.x11_name import parse_char_argument
from klay.cli.helpers.formats import LayoutFormat, detect_format
from klay.config import UserConfigData
from klay.linux import parse_symbols
from klay.macos import parse_keylayout
from klay.utils.utf16 import ByteOrder, encode_utf16
from klay.windows import read_klc


@pytest.fixture(scope="module", autouse=True)
def registered_app():
    """Register the commands once for the whole module."""
    register_all_commands(app)
    return app


class TestBasics:
    def test_help(self, cli_runner, isolated_environment):
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("parse", "convert", "x11-name"):
            assert command in result.output

    def test_version(self, cli_runner, isolated_environment):
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("klay v")

    def test_missing_config_file(self, cli_runner, isolated_environment, tmp_path):
        result = cli_runner.invoke(
            app, ["-c", str(tmp_path / "nope.yaml"), "x11-name", "a"]
        )
        assert result.exit_code == 1


class TestX11Name:
    """x11-name command."""

    def test_names(self, cli_runner, isolated_environment):
        result = cli_runner.invoke(app, ["x11-name", "a", "U00e6", "'"])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["a", "ae", "apostrophe"]

    def test_unnamed_character(self, cli_runner, isolated_environment):
        result = cli_runner.invoke(app, ["x11-name", "☃"])
        assert result.output.strip() == "U2603"

    def test_untranslatable_argument(self, cli_runner, isolated_environment):
        result = cli_runner.invoke(app, ["x11-name", "abc", "a"])
        assert result.exit_code == 1
        assert "couldn't translate `abc'" in result.output
        assert "a" in result.output.splitlines()

    @pytest.mark.parametrize(
        ("argument", "expected"),
        [("U", "U"), ("U41", "A"), ("Uzz", None), ("U110000", None), ("x", "x"), ("", None)],
    )
    def test_parse_char_argument(self, argument, expected):
        assert parse_char_argument(argument) == expected


class TestParse:
    """parse command."""

    def test_klc_json(self, cli_runner, isolated_environment, klc_file):
        result = cli_runner.invoke(app, ["parse", str(klc_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["name"] == "Test Layout"
        assert data["deadkeys"] == {"´": {"a": "á", "e": "é", " ": "´"}}

    def test_klc_table(self, cli_runner, isolated_environment, klc_file):
        result = cli_runner.invoke(app, ["parse", str(klc_file)])
        assert result.exit_code == 0
        assert "Test Layout" in result.output

    def test_symbols(self, cli_runner, isolated_environment, symbols_dir):
        result = cli_runner.invoke(app, ["parse", str(symbols_dir / "dk")])
        assert result.exit_code == 0
        assert "nodeadkeys" in result.output

    def test_descriptor(self, cli_runner, isolated_environment, tmp_path, sample_descriptor_text):
        path = tmp_path / "layout.toml"
        path.write_text(sample_descriptor_text, encoding="utf-8")
        result = cli_runner.invoke(app, ["parse", str(path), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["special"] == {"acute": {"deadkey": "´"}}

    def test_parse_error_exits_with_failure(self, cli_runner, isolated_environment, tmp_path):
        path = tmp_path / "broken.klc"
        path.write_bytes(encode_utf16("BOGUS\tline\r\n", ByteOrder.LITTLE))
        result = cli_runner.invoke(app, ["parse", str(path)])
        assert result.exit_code == 1

    def test_missing_file(self, cli_runner, isolated_environment, tmp_path):
        result = cli_runner.invoke(app, ["parse", str(tmp_path / "nope.klc")])
        assert result.exit_code != 0


class TestConvert:
    """convert command."""

    def test_klc_to_xkb(self, cli_runner, isolated_environment, klc_file, symbols_dir):
        output = klc_file.parent / "test"
        result = cli_runner.invoke(
            app,
            [
                "convert",
                str(klc_file),
                str(output),
                "--symbols-dir",
                str(symbols_dir),
                "--dead-key",
                "00b4=acute",
                "--no-prompt",
            ],
        )
        assert result.exit_code == 0, result.output

        partial = parse_symbols(output.read_text(encoding="utf-8")).default_partial
        assert partial.include == "dk(basic)"
        assert partial.name_group1 == "Test Layout"
        assert sorted(key.value for key in partial.keys) == ["AC01", "AC11"]
        assert "dead_acute" in output.read_text(encoding="utf-8")

    def test_default_output_drops_extension(
        self, cli_runner, isolated_environment, klc_file, symbols_dir
    ):
        result = cli_runner.invoke(
            app,
            ["convert", str(klc_file), "--symbols-dir", str(symbols_dir), "--no-prompt"],
        )
        assert result.exit_code == 0, result.output
        assert (klc_file.parent / "test").is_file()

    def test_include_from_config(
        self, cli_runner, isolated_environment, klc_file, monkeypatch
    ):
        monkeypatch.setenv("KLAY_DEFAULT_INCLUDE", "")
        output = klc_file.parent / "plain"
        result = cli_runner.invoke(app, ["convert", str(klc_file), str(output), "--no-prompt"])
        assert result.exit_code == 0, result.output
        partial = parse_symbols(output.read_text(encoding="utf-8")).default_partial
        assert partial.include is None
        assert len(partial.keys) == 5

    def test_missing_include_fails(self, cli_runner, isolated_environment, klc_file):
        result = cli_runner.invoke(
            app,
            ["convert", str(klc_file), str(klc_file.parent / "out"), "--include", "zz(basic)"],
        )
        assert result.exit_code == 1

    def test_klc_to_keylayout(self, cli_runner, isolated_environment, klc_file):
        output = klc_file.parent / "test.keylayout"
        result = cli_runner.invoke(app, ["convert", str(klc_file), str(output)])
        assert result.exit_code == 0, result.output

        keylayout = parse_keylayout(output.read_text(encoding="utf-8"))
        assert keylayout.name == "Test Layout"
        assert len(keylayout.key_map_set.key_maps) == 9

    def test_klc_to_klc(self, cli_runner, isolated_environment, klc_file):
        output = klc_file.parent / "copy.klc"
        result = cli_runner.invoke(app, ["convert", str(klc_file), str(output)])
        assert result.exit_code == 0, result.output
        assert read_klc(output) == read_klc(klc_file)

    def test_klc_to_descriptor(self, cli_runner, isolated_environment, klc_file):
        output = klc_file.parent / "test.toml"
        result = cli_runner.invoke(
            app,
            ["convert", str(klc_file), str(output), "--dead-key", "00b4=acute", "--no-prompt"],
        )
        assert result.exit_code == 0, result.output
        text = output.read_text(encoding="utf-8")
        assert "[special.acute]" in text or "[special]" in text
        assert "c11" in text

    def test_symbols_to_stdout(self, cli_runner, isolated_environment, symbols_dir):
        result = cli_runner.invoke(app, ["convert", str(symbols_dir / "dk")])
        assert result.exit_code == 0
        assert 'xkb_symbols "nodeadkeys"' in result.output

    def test_descriptor_to_symbols(
        self, cli_runner, isolated_environment, tmp_path, sample_descriptor_text
    ):
        path = tmp_path / "layout.toml"
        path.write_text(sample_descriptor_text, encoding="utf-8")
        output = tmp_path / "layout"
        result = cli_runner.invoke(app, ["convert", str(path), str(output)])
        assert result.exit_code == 0, result.output
        partial = parse_symbols(output.read_text(encoding="utf-8")).default_partial
        assert partial.name_group1 == "Test"

    def test_unsupported_pair(self, cli_runner, isolated_environment, symbols_dir, tmp_path):
        result = cli_runner.invoke(
            app, ["convert", str(symbols_dir / "dk"), str(tmp_path / "out.keylayout")]
        )
        assert result.exit_code == 1

    def test_bad_dead_key_option(self, cli_runner, isolated_environment, klc_file):
        result = cli_runner.invoke(
            app, ["convert", str(klc_file), "--dead-key", "acute", "--no-prompt"]
        )
        assert result.exit_code == 2


class TestHelpers:
    def test_detect_format(self, tmp_path):
        assert detect_format(tmp_path / "a.KLC") is LayoutFormat.KLC
        assert detect_format(tmp_path / "a.keylayout") is LayoutFormat.KEYLAYOUT
        assert detect_format(tmp_path / "a.toml") is LayoutFormat.DESCRIPTOR
        assert detect_format(tmp_path / "dk") is LayoutFormat.XKB

    def test_dead_key_resolver_merges_config_and_options(self, isolated_environment):
        config = UserConfigData(dead_key_names={"00b4": "acute", "60": "grave"})
        resolver = build_dead_key_resolver(config, ["60=dead_circumflex"], prompt=False)
        assert resolver.resolve("´") == "acute"
        assert resolver.resolve("`") == "circumflex"
        assert resolver.resolve("~") is None

    def test_dead_key_option_needs_name(self, isolated_environment):
        with pytest.raises(typer.BadParameter):
            build_dead_key_resolver(UserConfigData(), ["00b4"], prompt=False)
