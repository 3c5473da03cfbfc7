# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

famlink logs through two front ends: the workflow modules (registration,
service wiring) emit structlog events with keyword fields, while the store
and domain services use ``logging.getLogger(__name__)`` with ``%s``
messages. Both are rendered by one structlog ``ProcessorFormatter`` on the
root handler, so they share the output format and the fields bound with
``log_context``.

Example:
    >>> from famlink.utils.logging import setup_logging, get_logger, log_context
    >>> from famlink.core.config import get_settings
    >>> setup_logging(get_settings())
    >>> logger = get_logger(__name__)
    >>> with log_context(parent_id="-Nparent"):
    ...     logger.info("parent_created", linked=2)
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from famlink.core.config.settings import Settings

# The Admin SDK and its HTTP stack are chatty at DEBUG
NOISY_LOGGERS = (
    "firebase_admin",
    "google.auth",
    "urllib3",
    "asyncio",
)


def setup_logging(settings: "Settings") -> None:
    """Configure structured logging for famlink.

    Development (or debug) renders colored console lines, otherwise one
    JSON object per line. The root handler is replaced, so calling this
    again reconfigures rather than duplicates output.

    Args:
        settings: Application settings containing log_level and debug flag.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_development or settings.debug:
        renderers: list[Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *renderers,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.getLogger("famlink").setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        A bound structlog logger instance.
    """
    return structlog.get_logger(name)


@contextmanager
def log_context(**kwargs: object) -> Iterator[None]:
    """Tag every log line emitted inside the block.

    Applies to structlog and stdlib loggers alike. Values bound by an
    enclosing block are restored on exit.

    Args:
        **kwargs: Fields to add, e.g. ``parent_id``.
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
