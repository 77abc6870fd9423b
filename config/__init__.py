# ============================================================================
# CONFIG PACKAGE INIT
# ============================================================================
# STATUS: Configuration exports and singleton
# PURPOSE: Single import point for application configuration
# EXPORTS: AppConfig, FlyoutConfig, ClientConfig, get_config, reset_config, debug_config
# INTERFACES: Pydantic BaseModel
# PYDANTIC_MODELS: AppConfig, FlyoutConfig, ClientConfig, ClientMessages
# PATTERNS: Singleton, composition, facade
# ENTRY_POINTS: from config import get_config
# ============================================================================

"""
Configuration Package - Domain-Specific Configuration Modules

Structure:
    config/
    ├── __init__.py              # This file - exports and singleton
    ├── app_config.py            # Main config (composes domain configs)
    ├── flyout_config.py         # Server-side panels, tokens, UI flags
    ├── client_config.py         # Client runtime timings, selectors, i18n
    └── defaults.py              # Default value constants

Usage:
    # Shared instance
    from config import get_config
    config = get_config()
    capability = config.flyout.default_capability

    # Debug output
    from config import debug_config
    info = debug_config()  # Secrets masked
"""

from typing import Optional

from .flyout_config import FlyoutConfig
from .client_config import ClientConfig, ClientMessages
from .app_config import AppConfig

__version__ = "1.0.0"


# ============================================================================
# SINGLETON PATTERN
# ============================================================================

_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Process-wide AppConfig, loaded from the environment on first use.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = AppConfig.from_environment()
    return _config_instance


def reset_config() -> None:
    """Drop the cached singleton so the next get_config() re-reads the environment."""
    global _config_instance
    _config_instance = None


def debug_config() -> dict:
    """
    Configuration as a plain dict for the debug endpoint.

    The token secret is masked and client i18n strings are left out.
    Raises pydantic.ValidationError when the environment is invalid.
    """
    config = get_config()
    return {
        "version": __version__,
        "environment": config.environment,
        "debug_mode": config.debug_mode,
        "log_level": config.log_level,
        "flyout": config.flyout.debug_dict(),
        "client": config.client.debug_dict(),
    }


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    '__version__',
    'AppConfig',
    'get_config',
    'reset_config',
    'debug_config',
    'FlyoutConfig',
    'ClientConfig',
    'ClientMessages',
]
