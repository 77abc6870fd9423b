# ============================================================================
# FLYOUT PANEL CONFIGURATION
# ============================================================================
# STATUS: Configuration - Server-side panel and remote action settings
# PURPOSE: Defaults for panel width/position, capability gate, tokens, UI flags
# ============================================================================
"""
Flyout panel configuration.

Server-side settings that shape how panels render and how the remote action
surface authenticates requests.

Exports:
    FlyoutConfig: Pydantic configuration model
"""

import os

from pydantic import BaseModel, Field, field_validator

from .defaults import FlyoutDefaults, MessageDefaults, parse_bool


class FlyoutConfig(BaseModel):
    """
    Flyout server configuration.

    Configuration Fields:
    ---------------------
    ajax_url: URL of the remote action endpoint delivered to the client
    default_capability: Capability required when a panel does not name one
    default_width / default_position: Panel layout defaults
    token_secret: HMAC secret used to issue and verify per-prefix tokens
    token_lifetime_seconds: Validity window of an issued token
    close_on_save / close_on_escape / close_on_overlay: client UI defaults
    empty_content_message: Placeholder text for tabs without content
    """

    ajax_url: str = Field(
        default=FlyoutDefaults.AJAX_URL,
        description="Remote action endpoint URL delivered in the client bootstrap"
    )

    default_capability: str = Field(
        default=FlyoutDefaults.DEFAULT_CAPABILITY,
        description="Capability claim required by panels that do not specify one"
    )

    default_width: str = Field(
        default=FlyoutDefaults.DEFAULT_WIDTH,
        description="Default panel width (small, medium, large, full)"
    )

    default_position: str = Field(
        default=FlyoutDefaults.DEFAULT_POSITION,
        description="Default panel position (left, right)"
    )

    token_secret: str = Field(
        default=FlyoutDefaults.TOKEN_SECRET,
        repr=False,
        description="HMAC secret for per-prefix tokens. Override: FLYOUT_TOKEN_SECRET"
    )

    token_lifetime_seconds: int = Field(
        default=FlyoutDefaults.TOKEN_LIFETIME_SECONDS,
        ge=60,
        description="Token validity window in seconds"
    )

    close_on_save: bool = Field(default=FlyoutDefaults.CLOSE_ON_SAVE)
    close_on_escape: bool = Field(default=FlyoutDefaults.CLOSE_ON_ESCAPE)
    close_on_overlay: bool = Field(default=FlyoutDefaults.CLOSE_ON_OVERLAY)

    empty_content_message: str = Field(
        default=MessageDefaults.EMPTY_CONTENT,
        description="Placeholder text rendered for a tab with no content entries"
    )

    @field_validator("default_width")
    @classmethod
    def validate_width(cls, v):
        if v not in FlyoutDefaults.VALID_WIDTHS:
            raise ValueError(f"Invalid width: {v}. Must be one of {FlyoutDefaults.VALID_WIDTHS}")
        return v

    @field_validator("default_position")
    @classmethod
    def validate_position(cls, v):
        if v not in FlyoutDefaults.VALID_POSITIONS:
            raise ValueError(f"Invalid position: {v}. Must be one of {FlyoutDefaults.VALID_POSITIONS}")
        return v

    @classmethod
    def from_environment(cls) -> "FlyoutConfig":
        """
        Load flyout configuration from environment variables.

        Environment Variables:
        ---------------------
        FLYOUT_AJAX_URL, FLYOUT_DEFAULT_CAPABILITY, FLYOUT_DEFAULT_WIDTH,
        FLYOUT_DEFAULT_POSITION, FLYOUT_TOKEN_SECRET, FLYOUT_TOKEN_LIFETIME_SECONDS,
        FLYOUT_CLOSE_ON_SAVE, FLYOUT_CLOSE_ON_ESCAPE, FLYOUT_CLOSE_ON_OVERLAY,
        FLYOUT_EMPTY_CONTENT_MESSAGE
        """
        return cls(
            ajax_url=os.environ.get("FLYOUT_AJAX_URL", FlyoutDefaults.AJAX_URL),
            default_capability=os.environ.get(
                "FLYOUT_DEFAULT_CAPABILITY", FlyoutDefaults.DEFAULT_CAPABILITY
            ),
            default_width=os.environ.get("FLYOUT_DEFAULT_WIDTH", FlyoutDefaults.DEFAULT_WIDTH),
            default_position=os.environ.get(
                "FLYOUT_DEFAULT_POSITION", FlyoutDefaults.DEFAULT_POSITION
            ),
            token_secret=os.environ.get("FLYOUT_TOKEN_SECRET", FlyoutDefaults.TOKEN_SECRET),
            token_lifetime_seconds=int(os.environ.get(
                "FLYOUT_TOKEN_LIFETIME_SECONDS", str(FlyoutDefaults.TOKEN_LIFETIME_SECONDS)
            )),
            close_on_save=parse_bool(
                os.environ.get("FLYOUT_CLOSE_ON_SAVE", str(FlyoutDefaults.CLOSE_ON_SAVE))
            ),
            close_on_escape=parse_bool(
                os.environ.get("FLYOUT_CLOSE_ON_ESCAPE", str(FlyoutDefaults.CLOSE_ON_ESCAPE))
            ),
            close_on_overlay=parse_bool(
                os.environ.get("FLYOUT_CLOSE_ON_OVERLAY", str(FlyoutDefaults.CLOSE_ON_OVERLAY))
            ),
            empty_content_message=os.environ.get(
                "FLYOUT_EMPTY_CONTENT_MESSAGE", MessageDefaults.EMPTY_CONTENT
            ),
        )

    def debug_dict(self) -> dict:
        """Return debug-friendly configuration dictionary (secret masked)."""
        return {
            "ajax_url": self.ajax_url,
            "default_capability": self.default_capability,
            "default_width": self.default_width,
            "default_position": self.default_position,
            "token_secret": "***MASKED***" if self.token_secret else None,
            "token_lifetime_seconds": self.token_lifetime_seconds,
            "close_on_save": self.close_on_save,
            "close_on_escape": self.close_on_escape,
            "close_on_overlay": self.close_on_overlay,
        }


__all__ = ["FlyoutConfig"]
