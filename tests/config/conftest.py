"""
Config test fixtures: clean environment via monkeypatch.
"""

import pytest


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all env vars that config modules might read, for isolation."""
    env_vars_to_clear = [
        "FLYOUT_AJAX_URL", "FLYOUT_DEFAULT_CAPABILITY", "FLYOUT_DEFAULT_WIDTH",
        "FLYOUT_DEFAULT_POSITION", "FLYOUT_TOKEN_SECRET", "FLYOUT_TOKEN_LIFETIME_SECONDS",
        "FLYOUT_CLOSE_ON_SAVE", "FLYOUT_CLOSE_ON_ESCAPE", "FLYOUT_CLOSE_ON_OVERLAY",
        "FLYOUT_EMPTY_CONTENT_MESSAGE",
        "FLYOUT_CLIENT_CLOSE_DURATION", "FLYOUT_CLIENT_OVERLAY_DURATION",
        "FLYOUT_CLIENT_HIGHLIGHT_DURATION", "FLYOUT_CLIENT_REQUEST_TIMEOUT",
        "FLYOUT_CLIENT_TABLE_SELECTOR",
        "DEBUG_MODE", "ENVIRONMENT", "LOG_LEVEL",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch
