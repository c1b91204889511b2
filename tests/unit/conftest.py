"""
Unit test configuration.

Patches dotenv so pydantic-settings never reads a real .env file during unit
tests, and clears the process-wide settings and default detector so tests
control configuration exclusively through monkeypatch.setenv().
"""

import json

import pytest

from botagent.config import get_settings
from botagent.detection import get_default_detector


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all unit tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


@pytest.fixture(autouse=True)
def fresh_defaults():
    get_settings.cache_clear()
    get_default_detector.cache_clear()
    yield
    get_settings.cache_clear()
    get_default_detector.cache_clear()


@pytest.fixture
def write_patterns(tmp_path):
    """Write a pattern file and return its path.

    Lists are serialised as JSON; strings are written verbatim so tests can
    produce malformed content.
    """
    counter = iter(range(1_000_000))

    def _write(content, name=None):
        path = tmp_path / (name or f"patterns_{next(counter)}.json")
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write
