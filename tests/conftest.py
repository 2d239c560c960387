"""
Pytest configuration and fixtures for ff-querybuilder tests.
"""

from unittest.mock import MagicMock

import pytest
from ff_querybuilder import ConnectionBackend, MySQLDMLQueryBuilder, MySQLEscaper, NullLogger
from ff_querybuilder.config import get_settings, load_settings

_ENV_VARS = (
    "FF_QB_LOG_LEVEL",
    "FF_QB_LOG_FORMAT",
    "FF_QB_LOG_COLORS",
    "FF_QB_WARN_UNKNOWN_SELECT_MODE",
    "FF_QB_NO_BACKSLASH_ESCAPES",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep FF_QB_* variables and the settings cache from leaking between tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Settings with logging disabled."""
    return load_settings(log_format="null")


@pytest.fixture
def escaper():
    """Connection-less MySQL escaper with backslash escapes."""
    return MySQLEscaper(no_backslash_escapes=False)


@pytest.fixture
def builder(escaper, settings):
    """Fresh MySQL builder with a null logger."""
    return MySQLDMLQueryBuilder(escaper, logger=NullLogger("test"), settings=settings)


@pytest.fixture
def mock_backend():
    """Backend double that doubles single quotes and records calls."""
    backend = MagicMock(spec=ConnectionBackend)
    backend.escape_string.side_effect = lambda raw: raw.replace("'", "''")
    return backend


@pytest.fixture
def mock_logger():
    """Logger double for asserting log calls."""
    return MagicMock()
