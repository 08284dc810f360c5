"""User configuration models."""

from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from klay.config.models.logging import VALID_LEVELS


DEFAULT_SYMBOLS_PATHS = [Path("."), Path("/usr/share/X11/xkb/symbols")]


class UserConfigData(BaseSettings):
    """User configuration data model with automatic environment variable support.

    Precedence order (highest to lowest):
    1. Environment variables (``KLAY_`` prefix)
    2. Constructor arguments (file data)
    3. .env file
    4. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="KLAY_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Environment variables override configuration file values."""
        return (
            env_settings,
            init_settings,
            dotenv_settings,
            file_secret_settings,
        )

    log_level: str = "WARNING"

    # Directories searched for XKB symbols files named by includes
    xkb_symbols_paths: Annotated[list[Path], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_SYMBOLS_PATHS)
    )

    default_include: str = Field(
        default="dk(basic)",
        description="Symbols block a converted layout includes and is compared against",
    )

    # Hex code point -> XKB dead key name, e.g. {"00b4": "acute"}
    dead_key_names: dict[str, str] = Field(default_factory=dict)

    keylayout_group: int = Field(default=126, description="Script group of generated keylayouts")
    keylayout_id: int = Field(default=-19341, description="Identifier of generated keylayouts")

    @field_validator("xkb_symbols_paths", mode="before")
    @classmethod
    def decode_symbols_paths(cls, v: Any) -> list[Path]:
        if isinstance(v, str):
            return [Path(path.strip()).expanduser() for path in v.split(",") if path.strip()]
        elif isinstance(v, list):
            return [Path(str(path).strip()).expanduser() for path in v if str(path).strip()]
        return []

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a recognized value."""
        upper_v = v.strip().upper()
        if upper_v not in VALID_LEVELS:
            raise ValueError(f"Log level must be one of {VALID_LEVELS}")
        return upper_v
