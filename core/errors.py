"""
Error Code Definitions and Classification.

Centralized error code management for the remote action surface. Failures
travel as data in the response envelope; these codes give each failure an
explicit classification and an HTTP status.

Key Features:
    - Explicit error codes for all failure modes
    - Classification (SECURITY, CLIENT, DOMAIN, SERVER)
    - Mapping from exception types to codes

Exports:
    ErrorCode: Standardized error codes enum
    ErrorClassification: Error category enum
    get_error_classification: Classification lookup
    get_http_status_code: HTTP status for an error code
    error_code_for_exception: Map an exception instance to an ErrorCode
    create_error_response: Build a failure envelope payload
"""

from enum import Enum
from typing import Dict, Any

from exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    DomainError,
    ValidationError,
)


class ErrorCode(str, Enum):
    """
    Standardized error codes for all remote action failures.

    Returned in the `code` field of a failure envelope.
    """

    # ========================================================================
    # SECURITY GATE - checked before any host callback runs (HTTP 403)
    # ========================================================================

    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"  # Token missing or mismatched
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"  # Capability not held

    # ========================================================================
    # CLIENT ERRORS (HTTP 400)
    # ========================================================================

    INVALID_ACTION = "INVALID_ACTION"  # Action name not in the action table
    INVALID_PARAMETER = "INVALID_PARAMETER"  # e.g. non-positive delete id

    # ========================================================================
    # DOMAIN ERRORS - business-rule rejection from a host callback (HTTP 200)
    # ========================================================================

    DOMAIN_ERROR = "DOMAIN_ERROR"

    # ========================================================================
    # SERVER ERRORS (HTTP 500/501)
    # ========================================================================

    NOT_CONFIGURED = "NOT_CONFIGURED"  # Handler does not implement the action
    CONFIG_ERROR = "CONFIG_ERROR"  # Configuration error
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"  # Unexpected exception


class ErrorClassification(str, Enum):
    """
    Error classification for reporting and status mapping.
    """

    SECURITY = "SECURITY"  # Rejected by the token or capability gate
    CLIENT = "CLIENT"  # Malformed request, caller must fix
    DOMAIN = "DOMAIN"  # Expected business outcome, shown to the user
    SERVER = "SERVER"  # Bug or misconfiguration on the server


# Error code to classification mapping
_ERROR_CLASSIFICATION: Dict[ErrorCode, ErrorClassification] = {
    ErrorCode.AUTHENTICATION_FAILED: ErrorClassification.SECURITY,
    ErrorCode.AUTHORIZATION_FAILED: ErrorClassification.SECURITY,
    ErrorCode.INVALID_ACTION: ErrorClassification.CLIENT,
    ErrorCode.INVALID_PARAMETER: ErrorClassification.CLIENT,
    ErrorCode.DOMAIN_ERROR: ErrorClassification.DOMAIN,
    ErrorCode.NOT_CONFIGURED: ErrorClassification.SERVER,
    ErrorCode.CONFIG_ERROR: ErrorClassification.SERVER,
    ErrorCode.UNEXPECTED_ERROR: ErrorClassification.SERVER,
}

_HTTP_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.AUTHENTICATION_FAILED: 403,
    ErrorCode.AUTHORIZATION_FAILED: 403,
    ErrorCode.INVALID_ACTION: 400,
    ErrorCode.INVALID_PARAMETER: 400,
    # Domain errors are a normal outcome, the envelope carries ok=false
    ErrorCode.DOMAIN_ERROR: 200,
    ErrorCode.NOT_CONFIGURED: 501,
    ErrorCode.CONFIG_ERROR: 500,
    ErrorCode.UNEXPECTED_ERROR: 500,
}


def get_error_classification(error_code: ErrorCode) -> ErrorClassification:
    """
    Get the classification for an error code.

    Args:
        error_code: ErrorCode enum value

    Returns:
        ErrorClassification enum value

    Example:
        >>> get_error_classification(ErrorCode.AUTHENTICATION_FAILED)
        ErrorClassification.SECURITY
    """
    return _ERROR_CLASSIFICATION.get(error_code, ErrorClassification.SERVER)


def get_http_status_code(error_code: ErrorCode) -> int:
    """
    Get the appropriate HTTP status code for an error code.

    Args:
        error_code: ErrorCode enum value

    Returns:
        HTTP status code (200, 400, 403, 500, 501)

    Example:
        >>> get_http_status_code(ErrorCode.INVALID_PARAMETER)
        400
        >>> get_http_status_code(ErrorCode.DOMAIN_ERROR)
        200
    """
    return _HTTP_STATUS.get(error_code, 500)


def error_code_for_exception(exc: BaseException) -> ErrorCode:
    """
    Map an exception instance to its ErrorCode.

    Anything outside the business taxonomy is UNEXPECTED_ERROR.
    """
    if isinstance(exc, AuthenticationError):
        return ErrorCode.AUTHENTICATION_FAILED
    if isinstance(exc, AuthorizationError):
        return ErrorCode.AUTHORIZATION_FAILED
    if isinstance(exc, ValidationError):
        return ErrorCode.INVALID_PARAMETER
    if isinstance(exc, DomainError):
        return ErrorCode.DOMAIN_ERROR
    if isinstance(exc, ConfigurationError):
        return ErrorCode.CONFIG_ERROR
    return ErrorCode.UNEXPECTED_ERROR


def create_error_response(
    error_code: ErrorCode,
    message: str,
    **kwargs: Any
) -> Dict[str, Any]:
    """
    Create a standardized failure envelope payload.

    Args:
        error_code: ErrorCode enum value
        message: Human-readable error message
        **kwargs: Additional fields to include in response

    Returns:
        Dict in wire shape: {"ok": False, "error": ..., "code": ...}

    Example:
        >>> create_error_response(ErrorCode.AUTHENTICATION_FAILED, "Security check failed")
        {'ok': False, 'error': 'Security check failed', 'code': 'AUTHENTICATION_FAILED'}
    """
    response = {
        "ok": False,
        "error": message,
        "code": error_code.value,
        **kwargs
    }

    return response
