"""Structlog logger factory for klay."""

import structlog


def get_struct_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger with the given name.

    Args:
        name: The logger name, usually __name__

    Returns:
        A bound structlog logger that emits event-style messages
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]
