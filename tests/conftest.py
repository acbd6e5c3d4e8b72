"""Shared test fixtures for all test modules."""

import pytest
import structlog


@pytest.fixture(autouse=True)
def isolated_home(tmp_path_factory, monkeypatch):
    """
    Point HOME at a temporary directory for every test.

    configure_logging() and the default config/history paths all live under
    the home directory; tests must never touch the real one.
    """
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    yield home
    structlog.reset_defaults()
