"""Shared pytest fixtures."""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_poolstat_logging():
    """Undo handlers installed by ``configure_logging`` during a test."""
    yield
    poolstat_logger = logging.getLogger("poolstat")
    for handler in list(poolstat_logger.handlers):
        poolstat_logger.removeHandler(handler)
    poolstat_logger.setLevel(logging.NOTSET)
    poolstat_logger.propagate = True
