# ============================================================================
# EXCEPTIONS
# ============================================================================
# PURPOSE: Custom exception hierarchy for distinguishing contract violations
#          from business failures on both sides of the remote action surface
# EXPORTS: ContractViolationError, BusinessLogicError, AuthenticationError,
#          AuthorizationError, DomainError, ValidationError,
#          PanelNotRegisteredError, TransportError, ConfigurationError
# DEPENDENCIES: None (standard library only)
# ============================================================================

"""
Custom Exception Hierarchy

Distinguishes between:
1. Contract Violations (programming bugs that need fixing)
2. Business Logic Failures (expected runtime issues)

Business failures never cross the client/server boundary as exceptions. The
dispatcher converts them into failure envelopes and the client renders them
as notices.
"""


class ContractViolationError(TypeError):
    """
    Raised when component contracts are violated (programming bugs).

    These indicate:
    - Wrong types passed to functions
    - Illegal panel state transitions
    - Handlers returning values of the wrong shape

    These should NEVER be caught and handled - they indicate bugs
    that need to be fixed in the code.
    """
    pass


class BusinessLogicError(Exception):
    """
    Base class for expected runtime business logic failures.

    These are normal failures that occur during system operation
    and should be handled gracefully without crashing.
    """
    pass


class AuthenticationError(BusinessLogicError):
    """
    Request token missing or not equal to the prefix-scoped token.

    Raised before any host callback runs.
    """
    pass


class AuthorizationError(BusinessLogicError):
    """
    Caller does not hold the capability the panel requires.

    Raised before any host callback runs.
    """
    pass


class DomainError(BusinessLogicError):
    """
    Business-rule rejection signalled by a host callback.

    Examples:
        - Record not found on load
        - Required field missing on save
        - Item cannot be deleted while referenced

    Host callbacks may raise it or return an instance of it.
    """

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(BusinessLogicError):
    """
    Request parameters failed validation (e.g. non-positive delete id).
    """
    pass


class PanelNotRegisteredError(BusinessLogicError):
    """
    A trigger or request references a panel id that is not registered.
    """
    pass


class TransportError(BusinessLogicError):
    """
    Network round trip failed (connection error, timeout, non-envelope body).
    """
    pass


class ConfigurationError(Exception):
    """
    System configuration error.

    These are typically fatal and indicate misconfiguration
    that prevents the system from operating.

    Examples:
        - FLYOUT_TOKEN_SECRET not set when tokens are issued
        - Panel registered without a handler but with an action prefix
    """
    pass
