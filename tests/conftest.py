"""
Pytest configuration and fixtures for Hostwright tests.
"""

import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from hostwright.settings import reload_settings


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop settings cached by a previous test (env may have changed)."""
    reload_settings()
    yield
    reload_settings()


@pytest.fixture
def fake_host():
    """A stand-in for pyinfra's host whose facts come from a dict.

    Set ``fake_host.facts[FactClass] = value`` or a callable taking the fact
    kwargs.
    """
    host = MagicMock()
    host.name = "mac-mini-01"
    host.data.get.return_value = None
    host.facts = {}

    def get_fact(fact_cls, **kwargs):
        value = host.facts.get(fact_cls)
        if callable(value):
            return value(**kwargs)
        return value

    host.get_fact.side_effect = get_fact
    return host
