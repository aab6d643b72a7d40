#!/usr/bin/env python3
"""
Logging setup for docmeta.

Library modules log through `logging.getLogger(__name__)` and never
configure handlers themselves; applications (the CLI, tests) call
`setup_logging()` once to attach a console handler to the `docmeta`
logger, in plain text or structured JSON via python-json-logger.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Final, Optional, TextIO

from pythonjsonlogger.json import JsonFormatter

ROOT_LOGGER_NAME: Final[str] = "docmeta"

LOG_LEVELS: Final[dict[str, int]] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

TEXT_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(name)s %(module)s %(funcName)s %(message)s"


def resolve_level(level: Optional[str]) -> int:
    """Map a level name (argument, then DOCMETA_LOG_LEVEL, then INFO) to a logging level."""
    name = level or os.getenv("DOCMETA_LOG_LEVEL") or "INFO"
    return LOG_LEVELS.get(name.strip().upper(), logging.INFO)


def setup_logging(
    level: Optional[str] = None,
    fmt: str = "text",
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the `docmeta` logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (case-insensitive).
        fmt: "text" for human-readable lines, "json" for structured records.
        stream: destination stream (defaults to stderr).

    Returns:
        The configured `docmeta` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    log_level = resolve_level(level)
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(log_level)
    if fmt == "json":
        handler.setFormatter(JsonFormatter(JSON_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
