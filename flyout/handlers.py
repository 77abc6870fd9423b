# ============================================================================
# CLAUDE CONTEXT - PANEL_HANDLERS
# ============================================================================
# STATUS: Abstract base - Host callback contract for remote actions
# PURPOSE: Define the load/save/delete/row-markup capability interface
# EXPORTS: PanelHandler, CallbackHandler
# DEPENDENCIES: exceptions
# ============================================================================
"""
Host callback contract for panels.

A panel with an action prefix delegates its remote actions to a handler.
`on_load` is required; saving, deleting and row markup are optional
capabilities. A handler supports an optional capability when it overrides
the corresponding method.

Exports:
    PanelHandler: Abstract base class for host callbacks
    CallbackHandler: Handler assembled from plain functions
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Union, TYPE_CHECKING

from core.models.enums import PanelAction
from exceptions import DomainError

if TYPE_CHECKING:
    from core.models.envelope import RequestEnvelope
    from flyout.panel import Panel


ItemId = Union[int, str]


class PanelHandler(ABC):
    """
    Abstract base for host callbacks.

    Subclasses must implement:
        - on_load(panel, request) -> None | DomainError

    Optional (override to enable):
        - on_save(data) -> item id | DomainError
        - on_delete(item_id) -> bool | DomainError
        - on_row_markup(item_id) -> str | None

    Any of them may also raise DomainError.
    """

    @abstractmethod
    def on_load(self, panel: "Panel", request: "RequestEnvelope") -> Optional[DomainError]:
        """Populate the (already cleared) panel for this request."""

    def on_save(self, data: Dict[str, Any]) -> Union[ItemId, DomainError]:
        raise NotImplementedError

    def on_delete(self, item_id: int) -> Union[bool, DomainError]:
        raise NotImplementedError

    def on_row_markup(self, item_id: ItemId) -> Optional[str]:
        return None

    def supports(self, action: PanelAction) -> bool:
        """True when the handler implements the given action."""
        if action == PanelAction.LOAD:
            return True
        method = {
            PanelAction.SAVE: "on_save",
            PanelAction.DELETE: "on_delete",
        }[action]
        return getattr(type(self), method) is not getattr(PanelHandler, method)


class CallbackHandler(PanelHandler):
    """
    Handler built from plain functions.

    Example:
        handler = CallbackHandler(
            load=lambda panel, request: panel.add_content(None, "<p>Hi</p>"),
            save=store.save,
        )
    """

    def __init__(
        self,
        load: Callable[["Panel", "RequestEnvelope"], Any],
        save: Optional[Callable[[Dict[str, Any]], Any]] = None,
        delete: Optional[Callable[[int], Any]] = None,
        row_markup: Optional[Callable[[ItemId], Optional[str]]] = None,
    ):
        self._load = load
        self._save = save
        self._delete = delete
        self._row_markup = row_markup

    def on_load(self, panel, request):
        return self._load(panel, request)

    def on_save(self, data):
        if self._save is None:
            raise NotImplementedError
        return self._save(data)

    def on_delete(self, item_id):
        if self._delete is None:
            raise NotImplementedError
        return self._delete(item_id)

    def on_row_markup(self, item_id):
        if self._row_markup is None:
            return None
        return self._row_markup(item_id)

    def supports(self, action: PanelAction) -> bool:
        if action == PanelAction.SAVE:
            return self._save is not None
        if action == PanelAction.DELETE:
            return self._delete is not None
        return True
