"""Shared pytest fixtures."""

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_root_logging():
    """Drop handlers installed by configure_logging and restore the root level."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if getattr(handler, "_resolve_version_handler", False):
            root.removeHandler(handler)
    root.setLevel(level)
