"""
Client Bootstrap Models.

Page-level configuration bundle delivered to the client runtime as
`window.flyoutConfig`: endpoint URL, one entry per registered panel with
an action prefix, and i18n strings.

Exports:
    PanelAjaxConfig: Action names and token for one panel
    PanelUiConfig: UI flags for one panel
    PanelClientConfig: Per-panel client config
    ClientBootstrap: Page-level bundle
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from config.client_config import ClientMessages


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class PanelAjaxConfig(_CamelModel):
    """Remote action names derived from the action prefix, plus its token."""

    load_action: str
    save_action: str
    delete_action: str
    token: str


class PanelUiConfig(_CamelModel):
    """Per-panel UI behavior flags."""

    close_on_save: bool = True
    close_on_escape: bool = True
    close_on_overlay: bool = True


class PanelClientConfig(_CamelModel):
    """Client config for one panel: `{ajax: {...}, ui: {...}}`."""

    ajax: PanelAjaxConfig
    ui: PanelUiConfig = Field(default_factory=PanelUiConfig)


class ClientBootstrap(_CamelModel):
    """
    Page-level bundle read by the client runtime on startup.
    """

    ajax_url: str = Field(..., description="Remote action endpoint")
    flyouts: Dict[str, PanelClientConfig] = Field(default_factory=dict)
    i18n: ClientMessages = Field(default_factory=ClientMessages, alias="i18n")
