"""
User configuration management for klay.

Settings come from several sources:
1. Environment variables (highest precedence)
2. Command-line provided config file
3. Config file in current directory
4. User's XDG config directory
5. Default values (lowest precedence)
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from klay.config.models import LoggingConfig, UserConfigData
from klay.core.errors import ConfigError


logger = logging.getLogger(__name__)

ENV_PREFIX = "KLAY_"


class UserConfig:
    """Loads :class:`UserConfigData` from the first config file found plus the environment."""

    def __init__(self, cli_config_path: str | Path | None = None):
        self._config_sources: dict[str, str] = {}
        self._config_path: Path | None = None
        self._config_paths = self._generate_config_paths(cli_config_path)
        self._cli_config_path = (
            Path(cli_config_path).expanduser() if cli_config_path else None
        )
        self._load_config()

    @property
    def data(self) -> UserConfigData:
        return self._config

    @property
    def config_path(self) -> Path | None:
        """The config file that was loaded, if any."""
        return self._config_path

    def _generate_config_paths(self, cli_config_path: str | Path | None) -> list[Path]:
        """Generate a list of config paths to search in order of precedence."""
        config_paths = []

        if cli_config_path:
            config_paths.append(Path(cli_config_path).expanduser().resolve())

        config_paths.extend([Path.cwd() / "klay.yaml", Path.cwd() / ".klay.yml"])

        xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
        config_dir = (
            Path(xdg_config_home) / "klay"
            if xdg_config_home
            else Path.home() / ".config" / "klay"
        )
        config_paths.extend([config_dir / "config.yaml", config_dir / "config.yml"])

        return config_paths

    def _read_file(self, path: Path) -> dict[str, Any]:
        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(
                f"Could not read config file {path}: {e}", {"path": str(path)}
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file {path} must contain a mapping", {"path": str(path)}
            )
        return data

    def _load_config(self) -> None:
        logger.debug("Config search paths: %s", [str(p) for p in self._config_paths])

        if self._cli_config_path is not None and not self._cli_config_path.is_file():
            raise ConfigError(
                f"Config file not found: {self._cli_config_path}",
                {"path": str(self._cli_config_path)},
            )

        config_data: dict[str, Any] = {}
        for path in self._config_paths:
            if path.is_file():
                config_data = self._read_file(path)
                self._config_path = path
                logger.debug("Loaded user configuration from %s", path)
                break
        else:
            logger.debug("No user configuration file found, using defaults")

        try:
            self._config = UserConfigData(**config_data)
        except ValidationError as e:
            source = self._config_path or "environment"
            raise ConfigError(f"Invalid configuration in {source}: {e}") from e

        if self._config_path is not None:
            for key in config_data:
                self._config_sources[key] = f"file:{self._config_path.name}"
        for env_name in os.environ:
            if env_name.upper().startswith(ENV_PREFIX):
                key = env_name[len(ENV_PREFIX) :].lower().split("__")[0]
                if key in UserConfigData.model_fields:
                    self._config_sources[key] = "environment"

    def get_source(self, key: str) -> str:
        """Where a value came from: ``environment``, ``file:<name>`` or ``default``."""
        return self._config_sources.get(key, "default")

    def get(self, key: str, default: Any = None) -> Any:
        return getattr(self._config, key, default)

    def logging_config(
        self, level: str | None = None, log_file: Path | None = None
    ) -> LoggingConfig:
        """Logging settings, with command line overrides applied."""
        return LoggingConfig(
            level=level or self._config.log_level,
            file_path=log_file,
        )


def create_user_config(cli_config_path: str | Path | None = None) -> UserConfig:
    """Create a UserConfig instance.

    Raises:
        ConfigError: If a config file cannot be read or holds invalid values
    """
    return UserConfig(cli_config_path=cli_config_path)
