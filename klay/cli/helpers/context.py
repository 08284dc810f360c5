"""Access to shared CLI state."""

import logging

import typer

from klay.config.models import UserConfigData


logger = logging.getLogger(__name__)


def get_user_config_from_context(ctx: typer.Context) -> UserConfigData:
    """Get the loaded user configuration, falling back to defaults."""
    try:
        from klay.cli.app import AppContext

        app_ctx: AppContext = ctx.obj
        if app_ctx is not None:
            return app_ctx.user_config.data
    except (AttributeError, ImportError):
        logger.debug("Could not get user config from context")
    return UserConfigData()
