"""Configuration models."""

from klay.config.models.logging import LoggingConfig
from klay.config.models.user import UserConfigData


__all__ = ["LoggingConfig", "UserConfigData"]
