"""Main CLI application for klay."""

import logging
import sys
from importlib.metadata import distribution
from pathlib import Path
from typing import Annotated

import typer

from klay.cli.decorators.error_handling import print_stack_trace_if_verbose
from klay.cli.helpers.theme import get_themed_console
from klay.config.user_config import UserConfig, create_user_config
from klay.core.errors import ConfigError
from klay.core.logging import setup_logging_from_config


__all__ = ["AppContext", "__version__", "app", "main"]


__version__ = distribution("klay").version

logger = logging.getLogger(__name__)


class AppContext:
    """Application context for storing shared state."""

    def __init__(
        self,
        verbose: int = 0,
        log_file: str | None = None,
        config_file: str | None = None,
    ):
        self.verbose = verbose
        self.log_file = log_file
        self.config_file = config_file
        self.user_config: UserConfig = create_user_config(cli_config_path=config_file)


app = typer.Typer(
    name="klay",
    help=f"""klay keyboard layout translator v{__version__}

Converts keyboard layouts between the Windows KLC format, Linux XKB symbols
files, macOS keylayout documents and a TOML layout descriptor.

Common workflows:
  • Windows to Linux:  klay convert layout.klc layout
  • Windows to macOS:  klay convert layout.klc layout.keylayout
  • Inspect a layout:  klay parse layout.klc
  • Keysym names:      klay x11-name ø U00e6""",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity (-v=INFO, -vv=DEBUG)",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging (equivalent to -vv)"),
    ] = False,
    log_file: Annotated[
        str | None, typer.Option("--log-file", help="Also write JSON logs to a file")
    ] = None,
    config_file: Annotated[
        str | None,
        typer.Option("-c", "--config", help="Path to configuration file"),
    ] = None,
    version: Annotated[
        bool, typer.Option("--version", help="Show version and exit")
    ] = False,
) -> None:
    """klay keyboard layout translator."""
    if version:
        print(f"klay v{__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()

    try:
        app_context = AppContext(
            verbose=verbose, log_file=log_file, config_file=config_file
        )
    except ConfigError as e:
        get_themed_console().print_error(str(e))
        raise typer.Exit(1) from e
    ctx.obj = app_context

    # CLI flags win over the configured level
    level: str | None = None
    if debug or verbose >= 2:
        level = "DEBUG"
    elif verbose == 1:
        level = "INFO"

    setup_logging_from_config(
        app_context.user_config.logging_config(
            level=level, log_file=Path(log_file) if log_file else None
        )
    )


def main() -> int:
    """Main CLI entry point."""
    exit_code = 0

    try:
        from klay.cli.commands import register_all_commands

        register_all_commands(app)

        app()

    except SystemExit as e:
        exit_code = e.code if isinstance(e.code, int) else 0

    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        print_stack_trace_if_verbose()
        exit_code = 1

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
