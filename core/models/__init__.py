"""
Core Data Models Package.

Contains pure data structures without business logic.
All business logic is in the core.logic package.

Exports:
    PanelState, PanelAction, PanelWidth, PanelPosition: Enums
    RequestEnvelope, ResponseEnvelope: Remote action wire envelopes
    LoadData, SaveData, DeleteData: Success payloads
    PanelAjaxConfig, PanelUiConfig, PanelClientConfig, ClientBootstrap: Bootstrap bundle
"""

# Enums
from .enums import (
    PanelState,
    PanelAction,
    PanelWidth,
    PanelPosition
)

# Wire envelopes
from .envelope import (
    RequestEnvelope,
    ResponseEnvelope,
    LoadData,
    SaveData,
    DeleteData
)

# Bootstrap bundle
from .bootstrap import (
    PanelAjaxConfig,
    PanelUiConfig,
    PanelClientConfig,
    ClientBootstrap
)

__all__ = [
    # Enums
    'PanelState',
    'PanelAction',
    'PanelWidth',
    'PanelPosition',

    # Wire envelopes
    'RequestEnvelope',
    'ResponseEnvelope',
    'LoadData',
    'SaveData',
    'DeleteData',

    # Bootstrap
    'PanelAjaxConfig',
    'PanelUiConfig',
    'PanelClientConfig',
    'ClientBootstrap'
]
