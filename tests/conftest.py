from __future__ import annotations

import logging
import os
from collections.abc import Generator

import pytest

from gha_models.config import ParserSettings, UnknownKeyPolicy

# Register fixture plugins from tests/fixtures/
pytest_plugins = [
    "tests.fixtures.documents",
]


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for test environment.

    Runs automatically for every test so log output goes to stderr at
    WARNING level and never mixes with test stdout.
    """
    from gha_models.logging import clear_context, configure_logging

    configure_logging(level=logging.WARNING)
    yield
    clear_context()


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove all GHA_MODELS_ environment variables for clean testing."""
    original_env = os.environ.copy()
    for key in list(os.environ.keys()):
        if key.startswith("GHA_MODELS_"):
            del os.environ[key]
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def strict_settings(clean_env: None) -> ParserSettings:
    """Settings that reject unknown keys."""
    return ParserSettings(unknown_keys=UnknownKeyPolicy.REJECT)


@pytest.fixture
def lenient_settings(clean_env: None) -> ParserSettings:
    """Settings that warn about unknown keys and ignore them."""
    return ParserSettings(unknown_keys=UnknownKeyPolicy.WARN)
