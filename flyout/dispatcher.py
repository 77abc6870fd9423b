# ============================================================================
# CLAUDE CONTEXT - ACTION_DISPATCHER
# ============================================================================
# STATUS: Service - Remote action dispatch with token and capability gate
# PURPOSE: Route {prefix}_load|save|delete requests to panel handlers
# EXPORTS: ActionDispatcher, RequestContext
# DEPENDENCIES: util_logger, core.errors, core.models.envelope, flyout.tokens
# ============================================================================
"""
Remote action dispatcher.

Every panel with an action prefix contributes three remote actions
(`{prefix}_load`, `{prefix}_save`, `{prefix}_delete`). The dispatcher
resolves the action name to a panel, checks the request token and the
caller's capability, then runs the host callback.

Dispatch order (strictly ordered):
    1. Unknown action -> INVALID_ACTION
    2. Token mismatch -> AUTHENTICATION_FAILED (no callback runs)
    3. Missing capability -> AUTHORIZATION_FAILED (no callback runs)
    4. load / save / delete branch

Failures are returned as envelopes. Nothing raised by a host callback
reaches the caller.

Exports:
    ActionDispatcher: Dispatches RequestEnvelope -> ResponseEnvelope
    RequestContext: Caller identity and capability claims
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Tuple
import time

from config import FlyoutConfig, get_config
from config.defaults import MessageDefaults
from core.errors import ErrorCode, error_code_for_exception
from core.models.enums import PanelAction
from core.models.envelope import (
    DeleteData,
    LoadData,
    RequestEnvelope,
    ResponseEnvelope,
    SaveData,
)
from exceptions import (
    AuthenticationError,
    AuthorizationError,
    ContractViolationError,
    DomainError,
    ValidationError,
)
from flyout.registry import PanelRegistry
from flyout.tokens import TokenVerifier
from util_logger import LoggerFactory, ComponentType, LogContext


@dataclass(frozen=True)
class RequestContext:
    """
    Caller identity supplied by the host for one request.

    The core never authenticates users itself; it only checks the claims
    carried here.
    """

    capabilities: FrozenSet[str] = field(default_factory=frozenset)
    user_id: Optional[str] = None
    request_id: Optional[str] = None

    def can(self, capability: str) -> bool:
        return capability in self.capabilities


class ActionDispatcher:
    """
    Dispatches remote actions for the panels of one registry.

    The action table is derived from the registry on every dispatch, so a
    re-registered panel id only answers to its latest prefix.
    """

    def __init__(
        self,
        registry: PanelRegistry,
        token_verifier: TokenVerifier,
        config: Optional[FlyoutConfig] = None,
    ):
        self.registry = registry
        self.token_verifier = token_verifier
        self.config = config or get_config().flyout
        self.logger = LoggerFactory.create_logger(ComponentType.DISPATCHER, "ActionDispatcher")

    def action_table(self) -> Dict[str, Tuple[str, PanelAction]]:
        """Map of wire action name -> (panel id, action kind)."""
        table: Dict[str, Tuple[str, PanelAction]] = {}
        for panel in self.registry.panels():
            if not panel.action_prefix:
                continue
            for action in PanelAction:
                name = panel.action_name(action)
                if name in table and table[name][0] != panel.id:
                    self.logger.warning(
                        f"Action '{name}' of panel '{table[name][0]}' "
                        f"is shadowed by panel '{panel.id}'"
                    )
                table[name] = (panel.id, action)
        return table

    def dispatch(self, request: RequestEnvelope, context: Optional[RequestContext] = None) -> ResponseEnvelope:
        """
        Dispatch one remote action.

        Args:
            request: Parsed request envelope
            context: Caller identity and capabilities

        Returns:
            ResponseEnvelope (never raises for host callback failures)
        """
        context = context or RequestContext()
        start = time.monotonic()

        route = self.action_table().get(request.action)
        if route is None:
            self.logger.warning(f"Unknown action '{request.action}'")
            return ResponseEnvelope.failure(ErrorCode.INVALID_ACTION, MessageDefaults.INVALID_ACTION)

        panel_id, action = route
        panel = self.registry.get(panel_id)
        log_context = LogContext(
            panel_id=panel_id,
            action=request.action,
            request_id=context.request_id,
            user_id=context.user_id,
        )
        log_extra = {"custom_dimensions": log_context.to_dict()}

        try:
            self._check_access(panel, request, context)
        except (AuthenticationError, AuthorizationError) as e:
            self.logger.warning(f"Rejected '{request.action}': {e}", extra=log_extra)
            return ResponseEnvelope.failure(error_code_for_exception(e), str(e))

        try:
            if action == PanelAction.LOAD:
                response = self._load(panel, request)
            elif action == PanelAction.SAVE:
                response = self._save(panel, request)
            else:
                response = self._delete(panel, request)
        except DomainError as e:
            self.logger.info(f"Domain error in '{request.action}': {e.message}", extra=log_extra)
            return ResponseEnvelope.failure(ErrorCode.DOMAIN_ERROR, e.message or MessageDefaults.ERROR)
        except ValidationError as e:
            return ResponseEnvelope.failure(ErrorCode.INVALID_PARAMETER, str(e))
        except Exception as e:
            self.logger.exception(f"Unexpected error in '{request.action}': {e}", extra=log_extra)
            code = error_code_for_exception(e)
            return ResponseEnvelope.failure(code, MessageDefaults.UNEXPECTED)

        elapsed_ms = int((time.monotonic() - start) * 1000)
        self.logger.info(
            f"Dispatched '{request.action}' ok={response.ok} ({elapsed_ms}ms)",
            extra=log_extra,
        )
        return response

    # ------------------------------------------------------------------
    # Security gate
    # ------------------------------------------------------------------

    def _check_access(self, panel, request: RequestEnvelope, context: RequestContext) -> None:
        if not self.token_verifier.verify(request.token, panel.action_prefix):
            raise AuthenticationError(MessageDefaults.SECURITY_CHECK_FAILED)
        if not context.can(panel.required_capability):
            raise AuthorizationError(MessageDefaults.INSUFFICIENT_PERMISSIONS)

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    def _load(self, panel, request: RequestEnvelope) -> ResponseEnvelope:
        if panel.handler is None:
            return ResponseEnvelope.failure(ErrorCode.NOT_CONFIGURED, MessageDefaults.LOAD_NOT_CONFIGURED)

        panel.clear()
        result = panel.handler.on_load(panel, request)
        if isinstance(result, DomainError):
            raise result

        return ResponseEnvelope.success(LoadData(
            markup=panel.render(),
            client_config=panel.load_client_config(),
        ))

    def _save(self, panel, request: RequestEnvelope) -> ResponseEnvelope:
        handler = panel.handler
        if handler is None or not handler.supports(PanelAction.SAVE):
            return ResponseEnvelope.failure(ErrorCode.NOT_CONFIGURED, MessageDefaults.SAVE_NOT_CONFIGURED)

        result = handler.on_save(dict(request.payload))
        if isinstance(result, DomainError):
            raise result
        if result is None or isinstance(result, bool):
            raise ContractViolationError(
                f"on_save for panel '{panel.id}' returned {result!r}, expected an item id"
            )

        row_markup = handler.on_row_markup(result) or None
        return ResponseEnvelope.success(SaveData(
            id=result,
            message=MessageDefaults.SAVED,
            row_markup=row_markup,
        ))

    def _delete(self, panel, request: RequestEnvelope) -> ResponseEnvelope:
        handler = panel.handler
        if handler is None or not handler.supports(PanelAction.DELETE):
            return ResponseEnvelope.failure(ErrorCode.NOT_CONFIGURED, MessageDefaults.DELETE_NOT_CONFIGURED)

        item_id = parse_item_id(request.payload.get("id"))
        result = handler.on_delete(item_id)
        if isinstance(result, DomainError):
            raise result
        if result is False:
            raise DomainError(MessageDefaults.DELETE_FAILED)

        return ResponseEnvelope.success(DeleteData(id=item_id, message=MessageDefaults.DELETED))


def parse_item_id(value: Any) -> int:
    """
    Parse a positive integer item id.

    Raises:
        ValidationError: value is missing, not an integer or not positive
    """
    if isinstance(value, bool):
        raise ValidationError(MessageDefaults.INVALID_ID)
    try:
        item_id = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(MessageDefaults.INVALID_ID)
    if item_id <= 0:
        raise ValidationError(MessageDefaults.INVALID_ID)
    return item_id
