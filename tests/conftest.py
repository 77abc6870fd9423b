"""
Root conftest.py: sys.path, env vars, shared fixtures.

Sets up the test environment so all production code can be imported
without an Azure Functions host or real secrets.
"""

import os
import sys

import pytest

# Add project root to sys.path so 'core', 'flyout', 'config', etc. are importable
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from config import reset_config  # noqa: E402


TEST_TOKEN_SECRET = "test-token-secret"


@pytest.fixture(autouse=True, scope="session")
def set_minimal_env_vars():
    """
    Set minimal environment variables to prevent import crashes.

    Token issuing fails fast without a secret, so tests provide one.
    """
    defaults = {
        "FLYOUT_TOKEN_SECRET": TEST_TOKEN_SECRET,
        "ENVIRONMENT": "dev",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


@pytest.fixture(autouse=True)
def fresh_config():
    """Drop the config singleton around every test."""
    reset_config()
    yield
    reset_config()
