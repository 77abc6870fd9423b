"""
Pure Enumeration Types for Core Framework.

Defines panel lifecycle states, remote action kinds and layout options.
No business logic - pure type definitions only.

Exports:
    PanelState: Client panel lifecycle state enumeration
    PanelAction: Remote action kind (load, save, delete)
    PanelWidth: Panel width modifier
    PanelPosition: Panel slide-in side
"""

from enum import Enum


class PanelState(Enum):
    """
    Lifecycle states of a client panel instance.

    State transitions:
    - CLOSED -> LOADING -> OPENING -> OPEN (normal open)
    - CLOSED -> LOADING -> CLOSED (load failure)
    - OPEN -> SUBMITTING -> CLOSING -> CLOSED (save with close-on-save)
    - OPEN -> SUBMITTING -> OPEN (save failure)
    - OPEN -> LOADING (reload of an open panel)
    """

    CLOSED = "closed"
    LOADING = "loading"
    OPENING = "opening"
    OPEN = "open"
    SUBMITTING = "submitting"
    CLOSING = "closing"


class PanelAction(str, Enum):
    """
    Remote action kinds. The wire action name is `{prefix}_{value}`.
    """

    LOAD = "load"
    SAVE = "save"
    DELETE = "delete"


class PanelWidth(str, Enum):
    """Width modifier rendered as `flyout-{value}` on the panel root."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    FULL = "full"


class PanelPosition(str, Enum):
    """Side the panel slides in from."""

    LEFT = "left"
    RIGHT = "right"
