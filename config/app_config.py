"""
Main Application Configuration.

AppConfig holds the process-wide settings (environment name, debug mode,
log level) and composes the two domain configs, FlyoutConfig for the server
and ClientConfig for the client runtime.

Exports:
    AppConfig: Main configuration class
"""

import os

from pydantic import BaseModel, Field, field_validator

from util_logger import LogLevel
from .flyout_config import FlyoutConfig
from .client_config import ClientConfig
from .defaults import AppDefaults, parse_bool


class AppConfig(BaseModel):
    """Process settings plus the composed server and client configs."""

    debug_mode: bool = Field(
        default=AppDefaults.DEBUG_MODE,
        description="Expose the masked config dump and verbose errors (DEBUG_MODE)",
    )
    environment: str = Field(
        default=AppDefaults.ENVIRONMENT,
        description="Deployment name reported by the config dump (ENVIRONMENT)",
    )
    log_level: str = Field(
        default=AppDefaults.LOG_LEVEL,
        description="Default level for component loggers (LOG_LEVEL)",
    )

    flyout: FlyoutConfig = Field(default_factory=FlyoutConfig.from_environment)
    client: ClientConfig = Field(default_factory=ClientConfig.from_environment)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        try:
            return LogLevel.from_string(value).value
        except KeyError:
            raise ValueError(f"log_level must be one of {[lvl.value for lvl in LogLevel]}, got {value!r}")

    @classmethod
    def from_environment(cls) -> "AppConfig":
        """Read every setting from the process environment."""
        env = os.environ
        return cls(
            debug_mode=parse_bool(env.get("DEBUG_MODE", AppDefaults.DEBUG_MODE)),
            environment=env.get("ENVIRONMENT", AppDefaults.ENVIRONMENT),
            log_level=env.get("LOG_LEVEL", AppDefaults.LOG_LEVEL),
            flyout=FlyoutConfig.from_environment(),
            client=ClientConfig.from_environment(),
        )
