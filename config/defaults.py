"""
Configuration Defaults - Single source of truth for all default values.

Organization:
    - FlyoutDefaults: Server-side panel and remote action defaults
    - ClientDefaults: Client runtime timings and selectors
    - MessageDefaults: User-facing strings (server envelopes and client i18n)
    - AppDefaults: Environment, debug mode, logging

FAIL-FAST DESIGN:
    FlyoutDefaults.TOKEN_SECRET is intentionally empty. Issuing tokens with an
    empty secret raises ConfigurationError, so deployments fail loudly if
    FLYOUT_TOKEN_SECRET is not set.

Usage:
    from config.defaults import FlyoutDefaults, ClientDefaults

    # In Pydantic Field definitions:
    close_duration: float = Field(default=ClientDefaults.CLOSE_DURATION, ...)
"""


def parse_bool(value) -> bool:
    """Parse an environment string ("true", "1", "yes", "on") into a bool."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("true", "1", "yes", "on")


# =============================================================================
# FLYOUT (SERVER) DEFAULTS
# =============================================================================

class FlyoutDefaults:
    """
    Server-side panel defaults.

    Widths and positions mirror the CSS modifiers rendered on the panel root.
    """

    AJAX_URL = "/api/flyout"

    # Authorization claim checked before any host callback runs
    DEFAULT_CAPABILITY = "manage_options"

    DEFAULT_WIDTH = "medium"
    DEFAULT_POSITION = "right"
    VALID_WIDTHS = ("small", "medium", "large", "full")
    VALID_POSITIONS = ("left", "right")

    # Content key used when a panel has no tabs
    MAIN_CONTENT_KEY = "main"

    # Tokens - override: FLYOUT_TOKEN_SECRET
    TOKEN_SECRET = ""
    TOKEN_LIFETIME_SECONDS = 86400  # 24h, two half-life ticks accepted
    TOKEN_LENGTH = 10

    # UI flags delivered to the client per panel
    CLOSE_ON_SAVE = True
    CLOSE_ON_ESCAPE = True
    CLOSE_ON_OVERLAY = True


# =============================================================================
# CLIENT RUNTIME DEFAULTS
# =============================================================================

class ClientDefaults:
    """
    Client runtime timings (seconds) and document selectors.

    Timings match the CSS transitions of the stylesheet the markup is
    designed for.
    """

    OPEN_DELAY = 0.01
    CLOSE_DURATION = 0.3
    OVERLAY_DURATION = 0.3
    NOTICE_DURATION = 3.0
    SUCCESS_NOTICE_DURATION = 5.0
    HIGHLIGHT_DURATION = 2.0
    DELETE_DELAY = 0.3
    FADE_DURATION = 0.4
    REQUEST_TIMEOUT = 30.0

    TABLE_SELECTOR = "table.list-table"
    NOTICE_ANCHOR_SELECTOR = ".flyout-notices"


# =============================================================================
# MESSAGE DEFAULTS
# =============================================================================

class MessageDefaults:
    """User-facing strings."""

    SAVED = "Saved successfully"
    DELETED = "Deleted successfully"
    SECURITY_CHECK_FAILED = "Security check failed"
    INSUFFICIENT_PERMISSIONS = "Insufficient permissions"
    INVALID_ACTION = "Invalid action"
    INVALID_ID = "A valid item id is required"
    LOAD_NOT_CONFIGURED = "Load not configured"
    SAVE_NOT_CONFIGURED = "Save not configured"
    DELETE_NOT_CONFIGURED = "Delete not configured"
    DELETE_FAILED = "Delete failed"
    INVALID_REQUEST = "Invalid request"
    UNEXPECTED = "An unexpected error occurred"

    EMPTY_CONTENT = "Nothing to display."

    # Client i18n
    SAVING = "Saving..."
    DELETING = "Deleting..."
    LOADING = "Loading..."
    ERROR = "An error occurred"
    SUCCESS = "Saved successfully"
    REQUIRED = "Please fill in all required fields"
    NO_ITEMS = "No items found"
    CONFIRM_DELETE = "Are you sure you want to delete this item?"
    NETWORK_ERROR_PREFIX = "Network error"


# =============================================================================
# APPLICATION DEFAULTS
# =============================================================================

class AppDefaults:
    """
    Application-wide defaults.

    Controls debug mode and logging.
    """

    DEBUG_MODE = False
    ENVIRONMENT = "dev"
    LOG_LEVEL = "INFO"


# =============================================================================
# EXPORTS
# =============================================================================

__all__ = [
    "parse_bool",
    "FlyoutDefaults",
    "ClientDefaults",
    "MessageDefaults",
    "AppDefaults",
]
