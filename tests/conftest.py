# tests/conftest.py
from __future__ import annotations
import pytest

from transpipe.common import settings as settings_mod


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    """Every test sees settings built from its own environment."""
    monkeypatch.setenv("APP_ENV", "test")
    settings_mod.get_settings.cache_clear()
    yield
    settings_mod.get_settings.cache_clear()
