"""
bufrplan — shared pytest fixtures.

File: tests/conftest.py
Last updated: 2026-10-18

Purpose
- Keep process-wide logging state from leaking between tests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    yield
    logger = logging.getLogger("bufrplan")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    structlog.reset_defaults()
