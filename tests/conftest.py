"""Core test fixtures for the klay project."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from klay.utils.utf16 import ByteOrder, encode_utf16
from klay.windows import WinKeyLayout, parse_klc_text


SAMPLE_KLC = """\
KBD\ttest\t"Test Layout"

COPYRIGHT\t"(c) klay"

COMPANY\t"klay"

LOCALENAME\t"en-US"

LOCALEID\t"00000409"

VERSION\t1.0

SHIFTSTATE

0\t//Column 4
1\t//Column 5 : Shft
2\t//Column 6 :       Ctrl
6\t//Column 7 :       Ctrl Alt
7\t//Column 8 : Shft  Ctrl Alt

LAYOUT\t\t;an extra '@' at the end is a dead key

//SC\tVK_\t\tCap\t0\t1\t2\t6\t7
//--\t----\t\t----\t----\t----\t----\t----\t----

02\t1\t\t0\t1\t0021\t-1\t00b9\t-1
10\tQ\t\t1\tq\tQ\t0011\t-1\t-1
1e\tA\t\t1\ta\tA\t0001\t00e1\t00c1
28\tOEM_7\t\t0\t0027\t0022\t-1\t00b4@\t-1
39\tSPACE\t\t0\t0020\t0020\t0020\t-1\t-1

DEADKEY\t00b4

0061\t00e1
0065\t00e9
0020\t00b4

KEYNAME

01\tEsc
39\tSpace

KEYNAME_EXT

1c\t"Num Enter"

KEYNAME_DEAD

00b4\t"ACUTE ACCENT"

DESCRIPTIONS

0409\tTest Layout

LANGUAGENAMES

0409\tEnglish (United States)

ENDKBD
"""


SAMPLE_SYMBOLS = """\
// Baseline used by converted layouts
default  partial alphanumeric_keys
xkb_symbols "basic" {

    name[Group1]="Danish";

    key <AE01>\t{ [         1,     exclam,  onesuperior,   exclamdown ]\t};
    key <AD01>\t{ [         q,          Q ]\t};
    key <AC01>\t{ [         a,          A ]\t};
    key <SPCE>\t{ [     space,      space ]\t};
};

partial alphanumeric_keys
xkb_symbols "nodeadkeys" {

    include "dk(basic)"

    key <AC11>\t{ [ apostrophe,  quotedbl ]\t};
};
"""


SAMPLE_DESCRIPTOR = """\
[metadata]
name = "Test"
locale = "en-US"

[keymap]
e01 = ["1", "!"]
c01 = ["a", "A", "á", "Á"]
cma = [",", ";"]
c11 = ["'", "\\"", "acute"]

[special.acute]
deadkey = "´"
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_klc_text() -> str:
    return SAMPLE_KLC


@pytest.fixture
def sample_win_layout() -> WinKeyLayout:
    """The sample KLC document, parsed."""
    return parse_klc_text(SAMPLE_KLC)


@pytest.fixture
def sample_symbols_text() -> str:
    return SAMPLE_SYMBOLS


@pytest.fixture
def sample_descriptor_text() -> str:
    return SAMPLE_DESCRIPTOR


@pytest.fixture
def klc_file(tmp_path: Path) -> Path:
    """The sample KLC written as UTF-16 little-endian with a BOM, CRLF line endings."""
    path = tmp_path / "test.klc"
    text = SAMPLE_KLC.replace("\n", "\r\n")
    path.write_bytes(encode_utf16(text, ByteOrder.LITTLE, bom=True))
    return path


@pytest.fixture
def symbols_dir(tmp_path: Path) -> Path:
    """Directory holding the baseline ``dk`` symbols file."""
    directory = tmp_path / "symbols"
    directory.mkdir()
    (directory / "dk").write_text(SAMPLE_SYMBOLS, encoding="utf-8")
    return directory


@pytest.fixture
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Run in an empty directory with no user config or KLAY_ variables.

    Yields:
        The XDG config home used for the test
    """
    config_home = tmp_path / "xdg"
    config_home.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()

    monkeypatch.chdir(workdir)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    for name in [name for name in os.environ if name.startswith("KLAY_")]:
        monkeypatch.delenv(name)

    yield config_home
