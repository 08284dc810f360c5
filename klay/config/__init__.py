"""Configuration for klay."""

from klay.config.models import LoggingConfig, UserConfigData
from klay.config.user_config import UserConfig, create_user_config


__all__ = ["LoggingConfig", "UserConfig", "UserConfigData", "create_user_config"]
