#!/usr/bin/env python3
import logging

import pytest

from docmeta.core.manager import MetadataManager
from docmeta.core.processor import MetadataProcessor


@pytest.fixture(autouse=True)
def _restore_docmeta_logger():
    """setup_logging() reconfigures the 'docmeta' logger; undo it after each test."""
    logger = logging.getLogger("docmeta")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def processor() -> MetadataProcessor:
    return MetadataProcessor()


@pytest.fixture
def manager() -> MetadataManager:
    return MetadataManager()
