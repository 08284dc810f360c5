"""Tests for user configuration loading."""

from pathlib import Path

import pytest
import yaml

from klay.config import LoggingConfig, UserConfig, UserConfigData, create_user_config
from klay.core.errors import ConfigError


def write_config(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        yaml.dump(data, f)
    return path


class TestUserConfigData:
    def test_defaults(self, isolated_environment):
        data = UserConfigData()
        assert data.log_level == "WARNING"
        assert data.default_include == "dk(basic)"
        assert data.dead_key_names == {}
        assert data.keylayout_group == 126
        assert data.keylayout_id == -19341
        assert Path("/usr/share/X11/xkb/symbols") in data.xkb_symbols_paths

    def test_log_level_normalized(self, isolated_environment):
        assert UserConfigData(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self, isolated_environment):
        with pytest.raises(ValueError):
            UserConfigData(log_level="LOUD")

    def test_symbols_paths_from_comma_separated_env(
        self, isolated_environment, monkeypatch
    ):
        monkeypatch.setenv("KLAY_XKB_SYMBOLS_PATHS", "/a, /b")
        assert UserConfigData().xkb_symbols_paths == [Path("/a"), Path("/b")]


class TestUserConfig:
    """File discovery and precedence."""

    def test_no_file_uses_defaults(self, isolated_environment):
        config = create_user_config()
        assert config.config_path is None
        assert config.data.default_include == "dk(basic)"
        assert config.get_source("default_include") == "default"

    def test_explicit_file(self, isolated_environment, tmp_path):
        path = write_config(
            tmp_path / "custom.yaml",
            {"default_include": "us(basic)", "dead_key_names": {"00b4": "acute"}},
        )
        config = UserConfig(cli_config_path=path)

        assert config.config_path == path.resolve()
        assert config.data.default_include == "us(basic)"
        assert config.data.dead_key_names == {"00b4": "acute"}
        assert config.get_source("default_include") == "file:custom.yaml"
        assert config.get("keylayout_group") == 126

    def test_missing_explicit_file(self, isolated_environment, tmp_path):
        with pytest.raises(ConfigError):
            UserConfig(cli_config_path=tmp_path / "missing.yaml")

    def test_file_in_working_directory(self, isolated_environment):
        write_config(Path.cwd() / "klay.yaml", {"keylayout_group": 0})
        assert create_user_config().data.keylayout_group == 0

    def test_xdg_config_file(self, isolated_environment):
        write_config(isolated_environment / "klay" / "config.yaml", {"log_level": "INFO"})
        config = create_user_config()
        assert config.data.log_level == "INFO"
        assert config.config_path == isolated_environment / "klay" / "config.yaml"

    def test_working_directory_wins_over_xdg(self, isolated_environment):
        write_config(isolated_environment / "klay" / "config.yaml", {"log_level": "INFO"})
        write_config(Path.cwd() / ".klay.yml", {"log_level": "ERROR"})
        assert create_user_config().data.log_level == "ERROR"

    def test_environment_overrides_file(
        self, isolated_environment, tmp_path, monkeypatch
    ):
        path = write_config(tmp_path / "custom.yaml", {"default_include": "us(basic)"})
        monkeypatch.setenv("KLAY_DEFAULT_INCLUDE", "fr(basic)")

        config = UserConfig(cli_config_path=path)

        assert config.data.default_include == "fr(basic)"
        assert config.get_source("default_include") == "environment"

    def test_invalid_yaml(self, isolated_environment, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("log_level: [unclosed\n")
        with pytest.raises(ConfigError):
            UserConfig(cli_config_path=path)

    def test_non_mapping(self, isolated_environment, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            UserConfig(cli_config_path=path)

    def test_invalid_value(self, isolated_environment, tmp_path):
        path = write_config(tmp_path / "bad.yaml", {"keylayout_group": "many"})
        with pytest.raises(ConfigError):
            UserConfig(cli_config_path=path)

    def test_empty_file(self, isolated_environment, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert UserConfig(cli_config_path=path).data.log_level == "WARNING"


class TestLoggingConfig:
    def test_from_user_config(self, isolated_environment):
        logging_config = create_user_config().logging_config()
        assert logging_config == LoggingConfig(level="WARNING")

    def test_overrides(self, isolated_environment, tmp_path):
        logging_config = create_user_config().logging_config(
            level="debug", log_file=tmp_path / "klay.log"
        )
        assert logging_config.level == "DEBUG"
        assert logging_config.file_path == tmp_path / "klay.log"
        assert logging_config.get_log_level_int() == 10

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            LoggingConfig(level="chatty")
