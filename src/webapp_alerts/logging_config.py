"""Logging setup for the CLI and sample runner.

Module loggers stay plain ``logging.getLogger(__name__)`` loggers; structlog's
``ProcessorFormatter`` renders their records either as colored console lines
or as JSON objects.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

# Azure SDK loggers that log every HTTP request at INFO
NOISY_LOGGERS = [
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.identity",
]


def _shared_processors() -> list[Processor]:
    return [
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]


def build_formatter(structured: bool) -> structlog.stdlib.ProcessorFormatter:
    """Return a formatter rendering JSON lines or human-readable console output."""
    if structured:
        renderers: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
    )


def configure_logging(level: str = "INFO", structured: bool = False) -> logging.Logger:
    """Install a single structlog-formatted handler on the root logger and return it."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(build_formatter(structured))
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root
