"""Shared fixtures for the estreelib test suite."""

import pytest

from estreelib import ChildRuleRegistry
from estreelib.core import registry as registry_module


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: long-running stress tests")


@pytest.fixture
def registry():
    """A fresh registry with the full ESTree rule table."""
    return ChildRuleRegistry()


@pytest.fixture
def isolated_default_registry(monkeypatch):
    """Swap the process-wide registry for a fresh one for the test's duration."""
    fresh = ChildRuleRegistry()
    monkeypatch.setattr(registry_module, "_default_registry", fresh)
    return fresh

