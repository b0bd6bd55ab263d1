"""
Shared fixtures for dupsketch tests.
"""

import logging

import pytest

from dupsketch.config import ENV_OVERRIDES
from dupsketch.index.lsh import LSH
from dupsketch.sketch.sketcher import SuperMinHasher


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep DUPSKETCH_* variables from the host out of the tests."""
    monkeypatch.delenv("DUPSKETCH_CONFIG", raising=False)
    for suffix in ENV_OVERRIDES:
        monkeypatch.delenv(f"DUPSKETCH_{suffix}", raising=False)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI or a test attached to the dupsketch loggers."""
    yield
    for name in ("dupsketch", "dupsketch.index"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


@pytest.fixture
def lsh():
    return LSH()


@pytest.fixture
def sketcher():
    return SuperMinHasher(128, n_gram=5)


@pytest.fixture
def sample_words():
    return [f"word{i}" for i in range(300)]
