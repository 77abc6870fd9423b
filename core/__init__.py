"""
Core Building Blocks.

Types shared by the server (panel model, dispatcher) and the client runtime
(panel manager, table sync).

Structure:
    models/: Pure data structures (enums, wire envelopes, bootstrap bundle)
    logic/: Business logic separated from models (state transitions)
    errors.py: Error codes and failure envelopes

Exports:
    models, logic: Subpackages
    ErrorCode: Standardized error codes
"""

from . import models
from . import logic
from .errors import ErrorCode

__all__ = [
    'ErrorCode',
    'models',
    'logic'
]
