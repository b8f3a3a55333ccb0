"""Structured logging for the sale core, built on structlog.

Amounts are logged as exact decimal strings, never floats, so a log line can
be compared digit for digit with the on-chain value.
"""

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal
from typing import Any

import structlog

from fxfsale.fixed_point import to_decimal_string
from fxfsale.models import FixedPointAmount


def render_amounts(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Processor: replace Decimal and FixedPointAmount values with exact strings."""
    for key, value in event_dict.items():
        if isinstance(value, FixedPointAmount):
            event_dict[key] = to_decimal_string(value.magnitude, value.scale)
        elif isinstance(value, Decimal):
            event_dict[key] = format(value, "f")
    return event_dict


def setup_logging(log_level: str = "INFO", log_format: str | None = None) -> None:
    """Configure structlog with JSON or console rendering.

    Args:
        log_level: Root level name, e.g. "DEBUG". Unknown names fall back to INFO.
        log_format: "json" for machine-readable output, "console" for
            development. Defaults to the LOG_FORMAT environment variable,
            then "console".
    """
    if log_format is None:
        log_format = os.environ.get("LOG_FORMAT", "console")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        render_amounts,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format.lower() == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


@contextmanager
def account_context(account: str, raffle_id: int | None = None) -> Iterator[None]:
    """Bind the account (and raffle) to every event logged inside the block."""
    context: dict[str, Any] = {"account": account}
    if raffle_id is not None:
        context["raffle_id"] = raffle_id
    with structlog.contextvars.bound_contextvars(**context):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)
