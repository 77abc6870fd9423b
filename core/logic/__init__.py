"""
Core Business Logic Package.

Contains business logic that operates on pure data models.
Separated from models to maintain clean architecture.

Exports:
    State transitions: can_panel_transition, require_panel_transition, get_panel_transitions
"""

# State transitions
from .transitions import (
    can_panel_transition,
    get_panel_transitions,
    require_panel_transition
)

__all__ = [
    # State transitions
    'can_panel_transition',
    'get_panel_transitions',
    'require_panel_transition'
]
