# ============================================================================
# CLAUDE CONTEXT - PANEL_MANAGER
# ============================================================================
# STATUS: Client runtime - Panel lifecycle state machine
# PURPOSE: Open, switch, submit, delete and close panels in a ClientDocument
# EXPORTS: PanelManager, ClientInstance
# DEPENDENCIES: asyncio, bs4, core.logic.transitions, flyout_client.*
# ============================================================================
"""
Client panel manager.

Drives every panel through the lifecycle

    CLOSED -> LOADING -> OPENING -> OPEN -> SUBMITTING -> CLOSING -> CLOSED

validating each step against core.logic.transitions. The manager owns the
map panel_id -> ClientInstance; the shared overlay exists exactly while
that map is non-empty (once pending close windows have elapsed).

Requests are tracked per panel id. Starting a new request for a panel
cancels the one in flight for the same id, and closing a panel cancels its
request. Cancelled operations put the panel back into a stable state
before the next one starts.

Timers (activation, close window, overlay removal, notices) run on the
event loop with call_later, so callers observe them by sleeping.

Exports:
    PanelManager: Client lifecycle state machine
    ClientInstance: Per-panel client state
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union
import asyncio
import html as html_module
import inspect

from bs4 import Tag
from pydantic import ValidationError as PydanticValidationError

from config.client_config import ClientConfig
from config.defaults import MessageDefaults
from core.logic.transitions import require_panel_transition
from core.models.bootstrap import ClientBootstrap, PanelClientConfig, PanelUiConfig
from core.models.enums import PanelAction, PanelState
from core.models.envelope import RequestEnvelope, ResponseEnvelope
from exceptions import ContractViolationError, PanelNotRegisteredError, TransportError
from flyout_client.commands import TRIGGER_SELECTOR, TriggerCommand
from flyout_client.document import ClientDocument, DomEvent
from flyout_client.events import (
    EventBus,
    ItemDeleted,
    ItemSaved,
    PanelClosed,
    PanelOpened,
    TabChanged,
)
from flyout_client.notices import NoticeManager
from flyout_client.transport import Transport
from util_logger import LoggerFactory, ComponentType

OVERLAY_CLASS = "flyout-overlay"
BODY_OPEN_CLASS = "flyout-open"
LOADING_ID = "flyout-loading"
GLOBAL_NAMESPACE = "flyout"

ConfirmHook = Callable[[str], Union[bool, Awaitable[bool]]]


@dataclass
class ClientInstance:
    """Client-side state of one mounted panel."""

    panel_id: str
    node: Tag
    ui: PanelUiConfig
    payload: Dict[str, Any] = field(default_factory=dict)
    state: PanelState = PanelState.OPENING
    activate_handle: Optional[asyncio.TimerHandle] = None
    close_handle: Optional[asyncio.TimerHandle] = None

    @property
    def namespace(self) -> str:
        return f"{GLOBAL_NAMESPACE}.{self.panel_id}"


class PanelManager:
    """
    Client panel lifecycle.

    Usage:
        manager = PanelManager(document, transport, bootstrap, bus=bus).start()
        await manager.open("product-editor", {"id": "7"})
        await manager.submit("product-editor")
        manager.close("product-editor")
    """

    def __init__(
        self,
        document: ClientDocument,
        transport: Transport,
        bootstrap: ClientBootstrap,
        config: Optional[ClientConfig] = None,
        bus: Optional[EventBus] = None,
        confirm: Optional[ConfirmHook] = None,
    ):
        self.document = document
        self.transport = transport
        self.bootstrap = bootstrap
        self.config = config or ClientConfig()
        self.bus = bus or EventBus()
        self.confirm = confirm
        self.messages = bootstrap.i18n
        self.notices = NoticeManager(document, self.config)

        self.instances: Dict[str, ClientInstance] = {}
        self._states: Dict[str, PanelState] = {}
        self._operations: Dict[str, asyncio.Task] = {}
        self._pending_requests = 0
        self._overlay_removal: Optional[asyncio.TimerHandle] = None
        self.logger = LoggerFactory.create_logger(ComponentType.CLIENT, "PanelManager")

    # ========================================================================
    # SETUP
    # ========================================================================

    def start(self) -> "PanelManager":
        """Bind the delegated trigger listener."""
        self.document.on("click", TRIGGER_SELECTOR, self._on_trigger_click, namespace=GLOBAL_NAMESPACE)
        return self

    def stop(self) -> None:
        """Unbind everything and cancel in-flight operations."""
        self.document.off(GLOBAL_NAMESPACE)
        for instance in list(self.instances.values()):
            self.document.off(instance.namespace)
        for op in self._operations.values():
            if not op.done():
                op.cancel()

    # ========================================================================
    # STATE
    # ========================================================================

    def state(self, panel_id: str) -> PanelState:
        return self._states.get(panel_id, PanelState.CLOSED)

    def is_open(self, panel_id: str) -> bool:
        return self.state(panel_id) == PanelState.OPEN

    def is_registered(self, panel_id: str) -> bool:
        return panel_id in self.bootstrap.flyouts

    @property
    def overlay(self) -> Optional[Tag]:
        return self.document.select_one(f".{OVERLAY_CLASS}")

    def _set_state(self, panel_id: str, target: PanelState) -> None:
        current = self.state(panel_id)
        require_panel_transition(panel_id, current, target)
        if target == PanelState.CLOSED:
            self._states.pop(panel_id, None)
        else:
            self._states[panel_id] = target
        instance = self.instances.get(panel_id)
        if instance is not None:
            instance.state = target
        self.logger.debug(f"Panel '{panel_id}': {current.value} -> {target.value}")

    def _panel_config(self, panel_id: str) -> Optional[PanelClientConfig]:
        config = self.bootstrap.flyouts.get(panel_id)
        if config is None:
            error = PanelNotRegisteredError(f"Panel '{panel_id}' is not registered")
            self.logger.warning(str(error))
        return config

    # ========================================================================
    # TRIGGERS
    # ========================================================================

    def _on_trigger_click(self, event: DomEvent, node: Tag):
        event.prevent_default()
        try:
            command = TriggerCommand.from_element(node)
        except (ValueError, ContractViolationError) as e:
            self.logger.warning(f"Ignoring trigger: {e}")
            return None
        return self.execute(command)

    async def execute(self, command: TriggerCommand) -> bool:
        """Route a trigger command."""
        if self._panel_config(command.panel_id) is None:
            return False
        if command.action == PanelAction.LOAD:
            return await self.open(command.panel_id, command.payload)
        if command.action == PanelAction.DELETE:
            return await self.delete(command.panel_id, command.item_id, command.payload)
        return await self.submit(command.panel_id)

    # ========================================================================
    # OPERATIONS - per panel id, newest wins
    # ========================================================================

    async def _supersede(self, panel_id: str) -> None:
        """Cancel the operation in flight for panel_id and wait for its cleanup."""
        while True:
            op = self._operations.get(panel_id)
            if op is None or op.done():
                return
            self.logger.debug(f"Panel '{panel_id}': cancelling superseded request")
            op.cancel()
            await asyncio.wait({op})

    async def _run_operation(self, panel_id: str, coro) -> bool:
        try:
            await self._supersede(panel_id)
        except asyncio.CancelledError:
            coro.close()
            raise
        op = asyncio.ensure_future(coro)
        self._operations[panel_id] = op
        try:
            await asyncio.wait({op})
        except asyncio.CancelledError:
            op.cancel()
            raise
        finally:
            if self._operations.get(panel_id) is op:
                del self._operations[panel_id]
        if op.cancelled():
            return False
        return op.result()

    async def _send(self, action: str, token: str, payload: Dict[str, Any]) -> ResponseEnvelope:
        request = RequestEnvelope(action=action, token=token, payload=payload)
        self._pending_requests += 1
        self._sync_loading_indicator()
        try:
            return await self.transport.send(request)
        finally:
            self._pending_requests -= 1
            self._sync_loading_indicator()

    def _sync_loading_indicator(self) -> None:
        indicator = self.document.get_by_id(LOADING_ID)
        if self._pending_requests > 0 and indicator is None:
            self.document.append_markup(
                f'<div id="{LOADING_ID}" class="flyout-loading" aria-live="polite">'
                f'<span class="spinner is-active"></span>'
                f'<span>{html_module.escape(self.messages.loading)}</span>'
                f'</div>'
            )
        elif self._pending_requests == 0 and indicator is not None:
            self.document.remove(indicator)

    async def drain(self) -> None:
        """Wait until no operation is in flight."""
        while True:
            ops = [op for op in self._operations.values() if not op.done()]
            if not ops:
                return
            await asyncio.wait(ops)

    # ========================================================================
    # LOAD
    # ========================================================================

    async def open(self, panel_id: str, payload: Optional[Dict[str, Any]] = None) -> bool:
        """
        Load a panel and open it.

        Returns:
            True when the panel was mounted, False on failure, when the id is
            unknown, or when a newer request superseded this one
        """
        config = self._panel_config(panel_id)
        if config is None:
            return False
        return await self._run_operation(panel_id, self._load(panel_id, config, dict(payload or {})))

    async def _load(self, panel_id: str, config: PanelClientConfig, payload: Dict[str, Any]) -> bool:
        self._settle_transient(panel_id)
        previous = self.instances.get(panel_id)
        self._set_state(panel_id, PanelState.LOADING)

        try:
            response = await self._send(config.ajax.load_action, config.ajax.token, payload)
        except asyncio.CancelledError:
            self._restore_after_load(panel_id, previous)
            raise
        except TransportError as e:
            self._load_failed(panel_id, previous, f"{MessageDefaults.NETWORK_ERROR_PREFIX}: {e}")
            return False

        markup = (response.data or {}).get("markup") if response.ok else None
        if not markup:
            self._load_failed(panel_id, previous, response.error or self.messages.error)
            return False

        self._mount(panel_id, config, payload, response.data or {})
        return True

    def _settle_transient(self, panel_id: str) -> None:
        """Bring a panel in an animation window to a state that may start loading."""
        instance = self.instances.get(panel_id)
        if instance is None:
            return
        if instance.state == PanelState.OPENING:
            self._activate(instance)
        elif instance.state == PanelState.CLOSING:
            if instance.close_handle is not None:
                instance.close_handle.cancel()
            self._finish_close(instance)

    def _restore_after_load(self, panel_id: str, previous: Optional[ClientInstance]) -> None:
        if self.state(panel_id) != PanelState.LOADING:
            return
        if previous is not None and self.instances.get(panel_id) is previous:
            # Reload of an open panel: the old content stays
            self._set_state(panel_id, PanelState.OPENING)
            self._set_state(panel_id, PanelState.OPEN)
        else:
            self._set_state(panel_id, PanelState.CLOSED)

    def _load_failed(self, panel_id: str, previous: Optional[ClientInstance], message: str) -> None:
        self.logger.warning(f"Panel '{panel_id}' failed to load: {message}")
        self._restore_after_load(panel_id, previous)
        self.notices.page_notice(message, "error")

    def _mount(self, panel_id: str, config: PanelClientConfig, payload: Dict[str, Any], data: Dict[str, Any]) -> None:
        previous = self.instances.pop(panel_id, None)
        if previous is not None:
            self._cancel_timers(previous)
            self.document.off(previous.namespace)
            self.document.remove(previous.node)
        stale = self.document.get_by_id(panel_id)
        if stale is not None:
            self.document.remove(stale)

        node = self.document.append_markup(data["markup"])
        instance = ClientInstance(
            panel_id=panel_id,
            node=node,
            ui=self._ui_config(config, data.get("clientConfig") or {}),
            payload=payload,
            state=PanelState.LOADING,
        )
        self.instances[panel_id] = instance
        self._ensure_overlay()
        self.document.add_class(self.document.body, BODY_OPEN_CLASS)
        self._set_state(panel_id, PanelState.OPENING)
        self._bind(instance)

        instance.activate_handle = asyncio.get_running_loop().call_later(
            self.config.open_delay, self._activate, instance
        )

    def _ui_config(self, config: PanelClientConfig, client_config: Dict[str, Any]) -> PanelUiConfig:
        merged = {**config.ui.to_wire(), **(client_config.get("ui") or {})}
        try:
            return PanelUiConfig.model_validate(merged)
        except PydanticValidationError:
            self.logger.warning(f"Ignoring invalid ui config from server: {client_config.get('ui')!r}")
            return config.ui

    def _activate(self, instance: ClientInstance) -> None:
        if self.instances.get(instance.panel_id) is not instance or instance.state != PanelState.OPENING:
            return
        if instance.activate_handle is not None:
            instance.activate_handle.cancel()
            instance.activate_handle = None
        self.document.add_class(instance.node, "active")
        overlay = self.overlay
        if overlay is not None:
            self.document.add_class(overlay, "active")
        self._set_state(instance.panel_id, PanelState.OPEN)

        body = self.document.select_one(".flyout-body", instance.node) or instance.node
        self.document.focus(
            self.document.first_focusable(body)
            or self.document.first_focusable(instance.node)
            or instance.node
        )
        self.bus.publish(PanelOpened(instance.panel_id))

    # ========================================================================
    # OVERLAY
    # ========================================================================

    def _ensure_overlay(self) -> None:
        if self._overlay_removal is not None:
            self._overlay_removal.cancel()
            self._overlay_removal = None
        if self.overlay is None:
            self.document.append_markup(f'<div class="{OVERLAY_CLASS}"></div>')

    def _release_overlay(self) -> None:
        overlay = self.overlay
        self.document.remove_class(self.document.body, BODY_OPEN_CLASS)
        if overlay is None:
            return
        self.document.remove_class(overlay, "active")
        if self._overlay_removal is not None:
            self._overlay_removal.cancel()
        self._overlay_removal = asyncio.get_running_loop().call_later(
            self.config.overlay_duration, self._remove_overlay_if_idle
        )

    def _remove_overlay_if_idle(self) -> None:
        self._overlay_removal = None
        if self.instances:
            return
        self.document.remove(self.overlay)

    # ========================================================================
    # BINDINGS
    # ========================================================================

    def _owns(self, instance: ClientInstance, node: Tag) -> bool:
        owner = ClientDocument.closest(node, "[data-flyout-id]")
        return owner is instance.node and self.instances.get(instance.panel_id) is instance

    def _bind(self, instance: ClientInstance) -> None:
        ns = instance.namespace
        doc = self.document

        def on_close(event: DomEvent, node: Tag):
            if self._owns(instance, node):
                event.prevent_default()
                self.close(instance.panel_id)

        def on_tab(event: DomEvent, node: Tag):
            if self._owns(instance, node):
                event.prevent_default()
                self.switch_tab(instance.panel_id, node.get("data-tab", ""))

        def on_submit(event: DomEvent, node: Tag):
            if self._owns(instance, node):
                event.prevent_default()
                return self.submit(instance.panel_id)
            return None

        def on_delete(event: DomEvent, node: Tag):
            if self._owns(instance, node):
                event.prevent_default()
                return self.delete(instance.panel_id)
            return None

        def on_input(event: DomEvent, node: Tag):
            if self._owns(instance, node):
                doc.remove_class(node, "error")

        doc.on("click", ".flyout-close, .flyout-cancel", on_close, namespace=ns)
        doc.on("click", ".flyout-tab", on_tab, namespace=ns)
        doc.on("submit", "form.flyout-form", on_submit, namespace=ns)
        doc.on("click", ".flyout-delete", on_delete, namespace=ns)
        doc.on("input", ".error", on_input, namespace=ns)

        if instance.ui.close_on_overlay:
            doc.on("click", f".{OVERLAY_CLASS}", lambda event, node: self.close(instance.panel_id), namespace=ns)

        if instance.ui.close_on_escape:
            def on_keydown(event: DomEvent, node: Tag):
                if event.key == "Escape" and self.instances.get(instance.panel_id) is instance:
                    self.close(instance.panel_id)

            doc.on("keydown", None, on_keydown, namespace=ns)

    # ========================================================================
    # TABS
    # ========================================================================

    def switch_tab(self, panel_id: str, tab_id: str) -> bool:
        """
        Activate a tab of a mounted panel. Disabled and unknown tabs are ignored.
        """
        instance = self.instances.get(panel_id)
        if instance is None:
            return False
        links = self.document.select(".flyout-tab", instance.node)
        target = next((link for link in links if link.get("data-tab") == tab_id), None)
        if target is None or self.document.has_class(target, "disabled"):
            return False

        for link in links:
            selected = link is target
            self.document.toggle_class(link, "active", selected)
            link["aria-selected"] = "true" if selected else "false"
        for block in self.document.select(".flyout-tab-content", instance.node):
            self.document.toggle_class(block, "active", block.get("data-tab") == tab_id)

        self.bus.publish(TabChanged(panel_id, tab_id))
        return True

    def active_tab(self, panel_id: str) -> Optional[str]:
        instance = self.instances.get(panel_id)
        if instance is None:
            return None
        active = self.document.select_one(".flyout-tab.active", instance.node)
        return active.get("data-tab") if active is not None else None

    # ========================================================================
    # SAVE
    # ========================================================================

    def validate(self, panel_id: str) -> bool:
        """
        Check required fields of an open panel.

        Empty fields get the `error` class, the first one receives focus and
        a single inline notice is shown.
        """
        instance = self.instances.get(panel_id)
        if instance is None:
            return False
        form = self.document.select_one("form.flyout-form", instance.node) or instance.node

        invalid: List[Tag] = []
        seen_groups = set()
        for control in self.document.select("[required]", form):
            if self.document.is_disabled(control):
                continue
            input_type = (control.get("type") or "").lower()
            if input_type == "radio" and control.get("name"):
                name = control["name"]
                if name in seen_groups:
                    continue
                seen_groups.add(name)
                group = [
                    radio for radio in self.document.select('input[type="radio"]', form)
                    if radio.get("name") == name
                ]
                filled = any(radio.has_attr("checked") for radio in group)
                for radio in group:
                    self.document.toggle_class(radio, "error", not filled)
            else:
                if input_type in ("checkbox", "radio"):
                    filled = control.has_attr("checked")
                else:
                    filled = bool(str(self.document.field_value(control)).strip())
                self.document.toggle_class(control, "error", not filled)
            if not filled:
                invalid.append(control)

        if not invalid:
            return True

        block = ClientDocument.closest(invalid[0], ".flyout-tab-content")
        if block is not None and not self.document.has_class(block, "active"):
            self.switch_tab(panel_id, block.get("data-tab", ""))
        self.document.focus(invalid[0])
        self.notices.form_notice(instance.node, self.messages.required, "error")
        return False

    async def submit(self, panel_id: str) -> bool:
        """
        Validate and save an open panel.

        Returns:
            True when the save succeeded
        """
        instance = self.instances.get(panel_id)
        config = self._panel_config(panel_id)
        if instance is None or config is None or instance.state != PanelState.OPEN:
            return False
        if not self.validate(panel_id):
            return False
        form = self.document.select_one("form.flyout-form", instance.node) or instance.node
        data = self.document.serialize_form(form)
        return await self._run_operation(panel_id, self._save(instance, config, data))

    async def _save(self, instance: ClientInstance, config: PanelClientConfig, data: Dict[str, Any]) -> bool:
        panel_id = instance.panel_id
        if self.instances.get(panel_id) is not instance or instance.state != PanelState.OPEN:
            return False
        self._set_state(panel_id, PanelState.SUBMITTING)
        restore = self._busy_button(instance, "[type=submit], .flyout-save", self.messages.saving)

        try:
            response = await self._send(config.ajax.save_action, config.ajax.token, data)
        except asyncio.CancelledError:
            restore()
            if self.state(panel_id) == PanelState.SUBMITTING:
                self._set_state(panel_id, PanelState.OPEN)
            raise
        except TransportError as e:
            restore()
            self._submit_failed(instance, f"{MessageDefaults.NETWORK_ERROR_PREFIX}: {e}")
            return False
        restore()

        if not response.ok:
            self._submit_failed(instance, response.error or self.messages.error)
            return False

        result = response.data or {}
        message = result.get("message") or self.messages.success
        self.bus.publish(ItemSaved(
            panel_id=panel_id,
            item_id=result.get("id"),
            row_markup=result.get("rowMarkup"),
            message=message,
        ))

        if instance.ui.close_on_save:
            self._begin_close(instance)
            self.notices.page_notice(message, "success")
        else:
            self._set_state(panel_id, PanelState.OPEN)
            self.notices.form_notice(instance.node, message, "success")
        return True

    def _submit_failed(self, instance: ClientInstance, message: str) -> None:
        self.logger.warning(f"Panel '{instance.panel_id}' request failed: {message}")
        if self.state(instance.panel_id) == PanelState.SUBMITTING:
            self._set_state(instance.panel_id, PanelState.OPEN)
        self.notices.form_notice(instance.node, message, "error")

    def _busy_button(self, instance: ClientInstance, selector: str, label: str) -> Callable[[], None]:
        """Disable a button and swap its label; returns the undo function."""
        button = self.document.select_one(selector, instance.node)
        if button is None:
            return lambda: None
        original = button.get_text()
        was_disabled = button.has_attr("disabled")
        button["disabled"] = "disabled"
        button.string = label

        def restore() -> None:
            button.string = original
            if not was_disabled and button.has_attr("disabled"):
                del button["disabled"]

        return restore

    # ========================================================================
    # DELETE
    # ========================================================================

    async def _confirmed(self) -> bool:
        if self.confirm is None:
            return True
        answer = self.confirm(self.messages.confirm_delete)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    async def delete(self, panel_id: str, item_id: Any = None, payload: Optional[Dict[str, Any]] = None) -> bool:
        """
        Delete an item through a panel's delete action.

        The id comes from the argument, else the open panel's `id` field,
        else the payload's `id`/`row_id`.
        """
        config = self._panel_config(panel_id)
        if config is None:
            return False
        instance = self.instances.get(panel_id)
        if instance is not None and instance.state != PanelState.OPEN:
            return False

        if item_id in (None, "") and instance is not None:
            field_node = self.document.select_one('[name="id"]', instance.node)
            if field_node is not None:
                item_id = self.document.field_value(field_node)
        if item_id in (None, ""):
            source = payload or (instance.payload if instance is not None else {})
            item_id = source.get("id") or source.get("row_id")

        if not await self._confirmed():
            return False

        request_payload = {k: v for k, v in (payload or {}).items() if k != "row_id"}
        request_payload["id"] = item_id if item_id is not None else ""
        return await self._run_operation(panel_id, self._delete(panel_id, config, request_payload))

    async def _delete(self, panel_id: str, config: PanelClientConfig, payload: Dict[str, Any]) -> bool:
        instance = self.instances.get(panel_id)
        if instance is not None:
            if instance.state != PanelState.OPEN:
                return False
            self._set_state(panel_id, PanelState.SUBMITTING)
            restore = self._busy_button(instance, ".flyout-delete", self.messages.deleting)
        else:
            restore = lambda: None  # noqa: E731

        try:
            response = await self._send(config.ajax.delete_action, config.ajax.token, payload)
        except asyncio.CancelledError:
            restore()
            if instance is not None and self.state(panel_id) == PanelState.SUBMITTING:
                self._set_state(panel_id, PanelState.OPEN)
            raise
        except TransportError as e:
            restore()
            self._delete_failed(instance, f"{MessageDefaults.NETWORK_ERROR_PREFIX}: {e}")
            return False
        restore()

        if not response.ok:
            self._delete_failed(instance, response.error or self.messages.error)
            return False

        result = response.data or {}
        self.bus.publish(ItemDeleted(panel_id=panel_id, item_id=result.get("id", payload.get("id"))))
        if instance is not None and self.instances.get(panel_id) is instance:
            self._begin_close(instance)
        self.notices.page_notice(result.get("message") or MessageDefaults.DELETED, "success")
        return True

    def _delete_failed(self, instance: Optional[ClientInstance], message: str) -> None:
        if instance is not None and self.instances.get(instance.panel_id) is instance:
            self._submit_failed(instance, message)
        else:
            self.logger.warning(f"Delete failed: {message}")
            self.notices.page_notice(message, "error")

    # ========================================================================
    # CLOSE
    # ========================================================================

    def close(self, panel_id: str) -> bool:
        """
        Close a panel. Cancels its in-flight request.

        Returns:
            True when a mounted panel started closing (or already was)
        """
        op = self._operations.get(panel_id)
        if op is not None and not op.done() and op is not asyncio.current_task():
            op.cancel()

        instance = self.instances.get(panel_id)
        if instance is None:
            return False
        if instance.state == PanelState.CLOSING:
            return True
        if instance.state == PanelState.LOADING:
            # Reload in flight: drop the panel without the close window
            self._cancel_timers(instance)
            self._set_state(panel_id, PanelState.CLOSED)
            self._teardown(instance)
            return True
        self._begin_close(instance)
        return True

    def close_all(self) -> None:
        for panel_id in list(self.instances.keys()):
            self.close(panel_id)

    def _begin_close(self, instance: ClientInstance) -> None:
        self._cancel_timers(instance)
        self._set_state(instance.panel_id, PanelState.CLOSING)
        self.document.remove_class(instance.node, "active")
        instance.close_handle = asyncio.get_running_loop().call_later(
            self.config.close_duration, self._finish_close, instance
        )

    def _finish_close(self, instance: ClientInstance) -> None:
        instance.close_handle = None
        if self.instances.get(instance.panel_id) is not instance or instance.state != PanelState.CLOSING:
            return
        self._set_state(instance.panel_id, PanelState.CLOSED)
        self._teardown(instance)

    def _teardown(self, instance: ClientInstance) -> None:
        self.document.off(instance.namespace)
        self.document.remove(instance.node)
        self.instances.pop(instance.panel_id, None)
        instance.state = PanelState.CLOSED
        self.bus.publish(PanelClosed(instance.panel_id))
        if not self.instances:
            self._release_overlay()

    @staticmethod
    def _cancel_timers(instance: ClientInstance) -> None:
        for handle in (instance.activate_handle, instance.close_handle):
            if handle is not None:
                handle.cancel()
        instance.activate_handle = None
        instance.close_handle = None
