"""Library loggers: structlog bound loggers over stdlib ``logging``.

The library never calls ``structlog.configure``. Each logger carries its own
processor chain and hands events to the stdlib logger of its module, so
applications control output with ordinary ``logging`` handlers and levels.
"""

from __future__ import annotations

import logging

import structlog


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger that emits stdlib records under ``name``.

    The event becomes the record message and the bound key-value pairs
    become record attributes (via ``extra``).
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.render_to_log_kwargs,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
    )


__all__ = ["get_logger"]
