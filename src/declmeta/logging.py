# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Logging configuration utilities."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# ###############
# Public Interface
# ###############


def setup_logging(level: int = logging.INFO) -> None:
    """Configure standard library logging and structlog for JSON-friendly output."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.filter_by_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger("declmeta")
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)


def get_logger(name: str) -> Any:
    """Return a structlog logger over the standard library logger *name*.

    Events follow the level and handlers of the ``declmeta`` logger, which
    stays silent until :func:`setup_logging` is called.
    """
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)
