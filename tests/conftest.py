"""Shared fixtures."""

import pytest

from constants import Constants

_MUTABLE_SETTINGS = (
    "RELEASE_HISTORY_URL",
    "RELEASE_HISTORY_API",
    "RELEASE_CHANNEL_PREFIX",
    "REQUEST_TIMEOUT",
    "HTTP_RETRY_MAX",
    "HTTP_CACHE_TTL_SEC",
    "DEFAULT_MANIFEST_RULES",
)


@pytest.fixture(autouse=True)
def _restore_settings(monkeypatch):
    """Undo config and CLI overrides applied to Constants during a test."""
    for name in _MUTABLE_SETTINGS:
        monkeypatch.setattr(Constants, name, getattr(Constants, name))
    monkeypatch.setenv("DEVRANGE_LOG_LEVEL", "WARNING")
