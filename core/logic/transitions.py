"""
State Transition Logic for Client Panels.

Contains the rules for valid panel state transitions.
Separated from data models for clean architecture.

Exports:
    can_panel_transition: Check if panel state transition is valid
    get_panel_transitions: Allowed targets for a state
    require_panel_transition: Validate a transition or raise

Dependencies:
    core.models.enums: PanelState
    exceptions: ContractViolationError
"""

from typing import Dict, List

from exceptions import ContractViolationError
from ..models.enums import PanelState


_PANEL_TRANSITIONS: Dict[PanelState, List[PanelState]] = {
    PanelState.CLOSED: [PanelState.LOADING],
    # Failure returns to CLOSED, success starts opening
    PanelState.LOADING: [PanelState.CLOSED, PanelState.OPENING],
    PanelState.OPENING: [PanelState.OPEN, PanelState.CLOSING],
    # Reload of an open panel goes back through LOADING
    PanelState.OPEN: [PanelState.SUBMITTING, PanelState.CLOSING, PanelState.LOADING],
    PanelState.SUBMITTING: [PanelState.OPEN, PanelState.CLOSING],
    PanelState.CLOSING: [PanelState.CLOSED],
}


def can_panel_transition(current: PanelState, target: PanelState) -> bool:
    """
    Check if a panel can transition from current to target state.

    Args:
        current: Current panel state
        target: Target panel state

    Returns:
        True if transition is valid, False otherwise
    """
    return target in _PANEL_TRANSITIONS.get(current, [])


def get_panel_transitions(current: PanelState) -> List[PanelState]:
    """
    Get the states reachable from the current state in one step.

    Returns:
        List of target panel states (copy)
    """
    return list(_PANEL_TRANSITIONS.get(current, []))


def require_panel_transition(panel_id: str, current: PanelState, target: PanelState) -> None:
    """
    Validate a transition, raising on an illegal one.

    Raises:
        ContractViolationError: transition not in the table
    """
    if not can_panel_transition(current, target):
        raise ContractViolationError(
            f"Illegal panel transition for '{panel_id}': "
            f"{current.value} -> {target.value} "
            f"(allowed: {[state.value for state in get_panel_transitions(current)]})"
        )
