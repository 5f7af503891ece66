"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from chainable import VALUE, reset_settings

_ENV_VARS = ("CHAINABLE_UNKNOWN_FIELDS", "CHAINABLE_LOG_LEVEL", "CHAINABLE_QUIET")


# =============================================================================
# Fixtures: Clean Configuration
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Run every test against default settings, whatever the outer environment."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


# =============================================================================
# Fixtures: Recipients and Specifications
# =============================================================================


@pytest.fixture
def target():
    """A plain instance that accepts new attributes."""

    class Target:
        pass

    return Target()


@pytest.fixture
def prototype():
    """A fresh class used as a shared prototype recipient."""

    class Record:
        pass

    return Record


@pytest.fixture
def person_spec():
    """The specification from the end-to-end scenario."""
    return {
        "name": VALUE,
        "age": [VALUE, 0],
        "tags": lambda value: value[:3],
    }
