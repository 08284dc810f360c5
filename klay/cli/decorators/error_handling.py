"""Error handling decorators for CLI commands."""

import logging
import sys
import traceback
from collections.abc import Callable
from functools import wraps
from typing import Any

import typer

from klay.core.errors import (
    ConfigError,
    ConversionError,
    ParseError,
    TooManyOutputSlotsError,
)
from klay.core.structlog_logger import get_struct_logger


__all__ = ["handle_errors", "print_stack_trace_if_verbose"]

logger = get_struct_logger(__name__)


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to handle common exceptions in CLI commands.

    Known errors are logged with their context, a stack trace is printed in
    verbose mode, and the command exits with status 1.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ParseError as e:
            logger.error("parse_error", error=str(e), line=e.line_number, **e.context)
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except TooManyOutputSlotsError as e:
            logger.error("too_many_outputs", error=str(e), **e.context)
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except ConversionError as e:
            logger.error("conversion_error", error=str(e), **e.context)
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except ConfigError as e:
            logger.error("configuration_error", error=str(e))
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except FileNotFoundError as e:
            logger.error("file_not_found", error=str(e))
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except (typer.Exit, typer.BadParameter):
            raise
        except Exception as e:
            exc_info = logger.isEnabledFor(logging.DEBUG)
            logger.error("unexpected_error", error=str(e), exc_info=exc_info)
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e

    return wrapper


def print_stack_trace_if_verbose() -> None:
    """Print stack trace if verbose/debug mode is enabled."""
    if any(arg in sys.argv for arg in ["-v", "-vv", "--verbose", "--debug"]):
        print("\nStack trace:", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
