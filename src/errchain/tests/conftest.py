from __future__ import annotations

import os

import pytest

from errchain import clear_settings_cache, configure_logging


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Fresh settings from a clean environment and silent logging for every test."""
    for key in list(os.environ):
        if key.startswith("ERRCHAIN_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    configure_logging(format="none")
    yield
    clear_settings_cache()
