"""Logging configuration model for klay."""

import logging
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator

from klay.models.base import KlayBaseModel


VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(KlayBaseModel):
    """Console and file logging settings."""

    level: str = Field(default="WARNING", description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    json_logs: bool = Field(default=False, description="Render console logs as JSON")
    file_path: Path | None = Field(default=None, description="Also write JSON logs to this file")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is recognized."""
        upper_v = v.strip().upper()
        if upper_v not in VALID_LEVELS:
            raise ValueError(f"Log level must be one of {VALID_LEVELS}")
        return upper_v

    @field_validator("file_path", mode="before")
    @classmethod
    def validate_file_path(cls, v: Any) -> Path | None:
        """Expand ``~`` in the log file path."""
        if v is None or v == "":
            return None
        return Path(v).expanduser()

    def get_log_level_int(self) -> int:
        return getattr(logging, self.level, logging.WARNING)  # type: ignore[no-any-return]
