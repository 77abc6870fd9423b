"""
Client runtime configuration.

Timings (seconds) used by the client panel manager and table sync, the
selectors they operate on, and the i18n strings delivered in the bootstrap
bundle.

Exports:
    ClientMessages: User-facing client strings
    ClientConfig: Client runtime configuration
"""

import os

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .defaults import ClientDefaults, MessageDefaults


class ClientMessages(BaseModel):
    """
    Client i18n strings.

    Serialized with camelCase keys into the bootstrap `i18n` object.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    saving: str = MessageDefaults.SAVING
    deleting: str = MessageDefaults.DELETING
    loading: str = MessageDefaults.LOADING
    error: str = MessageDefaults.ERROR
    success: str = MessageDefaults.SUCCESS
    required: str = MessageDefaults.REQUIRED
    no_items: str = MessageDefaults.NO_ITEMS
    confirm_delete: str = MessageDefaults.CONFIRM_DELETE


class ClientConfig(BaseModel):
    """
    Client runtime configuration.

    All durations are in seconds. Tests shrink them to milliseconds so the
    asyncio timers elapse quickly.
    """

    open_delay: float = Field(default=ClientDefaults.OPEN_DELAY, ge=0)
    close_duration: float = Field(default=ClientDefaults.CLOSE_DURATION, ge=0)
    overlay_duration: float = Field(default=ClientDefaults.OVERLAY_DURATION, ge=0)
    notice_duration: float = Field(
        default=ClientDefaults.NOTICE_DURATION, ge=0,
        description="Lifetime of inline validation notices"
    )
    success_notice_duration: float = Field(
        default=ClientDefaults.SUCCESS_NOTICE_DURATION, ge=0,
        description="Lifetime of page-level success notices"
    )
    highlight_duration: float = Field(default=ClientDefaults.HIGHLIGHT_DURATION, ge=0)
    delete_delay: float = Field(default=ClientDefaults.DELETE_DELAY, ge=0)
    fade_duration: float = Field(default=ClientDefaults.FADE_DURATION, ge=0)
    request_timeout: float = Field(default=ClientDefaults.REQUEST_TIMEOUT, gt=0)

    table_selector: str = Field(
        default=ClientDefaults.TABLE_SELECTOR,
        description="CSS selector of the list display kept in sync by TableSync"
    )
    notice_anchor_selector: str = Field(
        default=ClientDefaults.NOTICE_ANCHOR_SELECTOR,
        description="Container receiving page-level notices (falls back to <body>)"
    )

    messages: ClientMessages = Field(default_factory=ClientMessages)

    @classmethod
    def from_environment(cls) -> "ClientConfig":
        """
        Load client configuration from environment variables.

        Environment Variables:
        ---------------------
        FLYOUT_CLIENT_CLOSE_DURATION, FLYOUT_CLIENT_OVERLAY_DURATION,
        FLYOUT_CLIENT_HIGHLIGHT_DURATION, FLYOUT_CLIENT_REQUEST_TIMEOUT,
        FLYOUT_CLIENT_TABLE_SELECTOR
        """
        return cls(
            close_duration=float(os.environ.get(
                "FLYOUT_CLIENT_CLOSE_DURATION", str(ClientDefaults.CLOSE_DURATION)
            )),
            overlay_duration=float(os.environ.get(
                "FLYOUT_CLIENT_OVERLAY_DURATION", str(ClientDefaults.OVERLAY_DURATION)
            )),
            highlight_duration=float(os.environ.get(
                "FLYOUT_CLIENT_HIGHLIGHT_DURATION", str(ClientDefaults.HIGHLIGHT_DURATION)
            )),
            request_timeout=float(os.environ.get(
                "FLYOUT_CLIENT_REQUEST_TIMEOUT", str(ClientDefaults.REQUEST_TIMEOUT)
            )),
            table_selector=os.environ.get(
                "FLYOUT_CLIENT_TABLE_SELECTOR", ClientDefaults.TABLE_SELECTOR
            ),
        )

    def debug_dict(self) -> dict:
        """Return debug-friendly configuration dictionary."""
        return self.model_dump(exclude={"messages"})


__all__ = ["ClientMessages", "ClientConfig"]
