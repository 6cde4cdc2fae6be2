"""Pytest configuration and fixtures for noticegen tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_noticegen_logger():
    """Undo handlers installed by CLI invocations between tests."""
    logger = logging.getLogger("noticegen")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def notices_toml(tmp_path):
    """Write a notices.toml into tmp_path and return its path."""

    def _write(body: str):
        path = tmp_path / "notices.toml"
        path.write_text(body, encoding="utf-8")
        return path

    return _write
