# ============================================================================
# CLAUDE CONTEXT - PANEL_MODEL
# ============================================================================
# STATUS: Model - Server-side slide-out panel description and renderer
# PURPOSE: Accumulate title/tabs/content/footer and render the panel markup
# EXPORTS: Panel, Tab
# DEPENDENCIES: html, config, flyout.content
# ============================================================================
"""
Server-side panel model.

A Panel is a mutable description of one slide-out panel: header, optional
tab navigation, per-tab content and an optional footer. Host callbacks
populate it on each load request; `render()` turns the current state into
markup without changing it.

Markup contract:
    div#{id}.flyout.flyout-{width}.flyout-{position}[data-flyout-id]
        .flyout-header        title + button.flyout-close
        nav.flyout-tabs       a.flyout-tab[data-tab][aria-selected]  (tabs only)
        form.flyout-form      (only when the panel is a form)
            .flyout-body      div.flyout-tab-content#{id}-tab-{tab}[data-tab]
            .flyout-footer    (only when a footer is set)

Exports:
    Panel: The panel model
    Tab: Tab descriptor
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, TYPE_CHECKING
import html as html_module
import logging

from config import FlyoutConfig, get_config
from config.defaults import FlyoutDefaults
from core.models.bootstrap import PanelAjaxConfig, PanelClientConfig, PanelUiConfig
from core.models.enums import PanelAction, PanelPosition, PanelWidth
from flyout.content import ContentEntry, is_blank, render_entry
from flyout.handlers import PanelHandler

if TYPE_CHECKING:
    from flyout.registry import PanelRegistry

logger = logging.getLogger(__name__)

MAIN = FlyoutDefaults.MAIN_CONTENT_KEY


@dataclass
class Tab:
    """One entry of the tab navigation."""

    id: str
    label: str
    disabled: bool = False
    icon: Optional[str] = None
    badge: Optional[str] = None


class Panel:
    """
    Slide-out panel model.

    Mutators change the panel in place, never raise, and return the panel
    so calls can be chained.

    Example:
        panel = Panel("products", "Edit Product", action_prefix="products",
                      handler=ProductHandler(store), registry=registry)
    """

    def __init__(
        self,
        panel_id: str,
        title: str = "",
        *,
        width: Optional[str] = None,
        position: Optional[str] = None,
        action_prefix: Optional[str] = None,
        capability: Optional[str] = None,
        handler: Optional[PanelHandler] = None,
        show_tabs: bool = True,
        close_on_save: Optional[bool] = None,
        close_on_escape: Optional[bool] = None,
        close_on_overlay: Optional[bool] = None,
        config: Optional[FlyoutConfig] = None,
        registry: Optional["PanelRegistry"] = None,
    ):
        self.config = config or get_config().flyout
        self.id = panel_id
        self.title = title
        self.width = self.config.default_width
        self.position = self.config.default_position
        self.action_prefix = action_prefix or None
        self.required_capability = capability or self.config.default_capability
        self.handler = handler
        self.show_tabs = show_tabs
        self.close_on_save = self.config.close_on_save if close_on_save is None else close_on_save
        self.close_on_escape = self.config.close_on_escape if close_on_escape is None else close_on_escape
        self.close_on_overlay = self.config.close_on_overlay if close_on_overlay is None else close_on_overlay

        self.extra_classes: Dict[str, None] = {}  # ordered set
        self.tabs: List[Tab] = []
        self.active_tab_id: Optional[str] = None
        self.content: Dict[str, List[ContentEntry]] = {}
        self.footer = ""
        self.is_form = False

        if width is not None:
            self.set_width(width)
        if position is not None:
            self.set_position(position)

        if registry is not None:
            registry.register(self)

    def __repr__(self) -> str:
        return f"Panel(id={self.id!r}, action_prefix={self.action_prefix!r})"

    # ------------------------------------------------------------------
    # Action names
    # ------------------------------------------------------------------

    def action_name(self, action: PanelAction) -> Optional[str]:
        """Wire action name for `action`, None when the panel has no prefix."""
        if not self.action_prefix:
            return None
        return f"{self.action_prefix}_{action.value}"

    @property
    def load_action(self) -> Optional[str]:
        return self.action_name(PanelAction.LOAD)

    @property
    def save_action(self) -> Optional[str]:
        return self.action_name(PanelAction.SAVE)

    @property
    def delete_action(self) -> Optional[str]:
        return self.action_name(PanelAction.DELETE)

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def set_title(self, text: str) -> "Panel":
        self.title = "" if text is None else str(text)
        return self

    def set_width(self, width: Any) -> "Panel":
        """Set the width modifier. Unknown widths are ignored."""
        value = width.value if isinstance(width, PanelWidth) else str(width)
        if value in FlyoutDefaults.VALID_WIDTHS:
            self.width = value
        else:
            logger.debug(f"Panel '{self.id}': ignoring invalid width {width!r}")
        return self

    def set_position(self, position: Any) -> "Panel":
        """Set the slide-in side. Unknown positions are ignored."""
        value = position.value if isinstance(position, PanelPosition) else str(position)
        if value in FlyoutDefaults.VALID_POSITIONS:
            self.position = value
        else:
            logger.debug(f"Panel '{self.id}': ignoring invalid position {position!r}")
        return self

    def add_class(self, css_class: str) -> "Panel":
        for name in str(css_class or "").split():
            self.extra_classes[name] = None
        return self

    def add_tab(
        self,
        tab_id: str,
        label: str,
        make_active: bool = False,
        *,
        disabled: bool = False,
        icon: Optional[str] = None,
        badge: Optional[str] = None,
    ) -> "Panel":
        """
        Add a tab, or replace the tab with the same id in place.

        The first tab becomes active unless a later one asks to be.
        """
        tab = Tab(id=str(tab_id), label=str(label), disabled=disabled, icon=icon, badge=badge)
        for index, existing in enumerate(self.tabs):
            if existing.id == tab.id:
                self.tabs[index] = tab
                break
        else:
            self.tabs.append(tab)

        if self.active_tab_id is None or make_active:
            self.active_tab_id = tab.id
        return self

    def add_content(self, tab_id: Optional[str], entry: ContentEntry, *, form_fields: bool = False) -> "Panel":
        """
        Append a content entry to a tab (or the main area when tab_id is empty).

        None and empty strings are ignored. `form_fields=True` marks the
        panel as a form.
        """
        if form_fields:
            self.is_form = True
        if is_blank(entry):
            return self
        key = str(tab_id) if tab_id else MAIN
        self.content.setdefault(key, []).append(entry)
        return self

    def add_many(self, tab_id: Optional[str], entries: Iterable[ContentEntry], *, form_fields: bool = False) -> "Panel":
        for entry in entries or ():
            self.add_content(tab_id, entry, form_fields=form_fields)
        return self

    def add_if(self, condition: Any, tab_id: Optional[str], entry: ContentEntry) -> "Panel":
        if condition:
            self.add_content(tab_id, entry)
        return self

    def add_if_not_empty(self, value: Any, tab_id: Optional[str], entry: Optional[ContentEntry] = None) -> "Panel":
        """Add `entry` (or `value` itself) when value is not empty."""
        if value is None or value == "" or value == [] or value == {}:
            return self
        return self.add_content(tab_id, value if entry is None else entry)

    def set_footer(self, markup: Optional[str]) -> "Panel":
        self.footer = markup or ""
        return self

    def mark_as_form(self) -> "Panel":
        self.is_form = True
        return self

    def clear(self) -> "Panel":
        """Reset per-request state before the load callback runs."""
        self.tabs = []
        self.active_tab_id = None
        self.content = {}
        self.footer = ""
        self.is_form = False
        return self

    # ------------------------------------------------------------------
    # Client configuration
    # ------------------------------------------------------------------

    def ui_config(self) -> PanelUiConfig:
        return PanelUiConfig(
            close_on_save=self.close_on_save,
            close_on_escape=self.close_on_escape,
            close_on_overlay=self.close_on_overlay,
        )

    def client_config(self, token: str) -> Optional[PanelClientConfig]:
        """Bootstrap entry for this panel, None when it has no action prefix."""
        if not self.action_prefix:
            return None
        return PanelClientConfig(
            ajax=PanelAjaxConfig(
                load_action=self.load_action,
                save_action=self.save_action,
                delete_action=self.delete_action,
                token=token,
            ),
            ui=self.ui_config(),
        )

    def load_client_config(self) -> Dict[str, Any]:
        """Client config returned alongside markup by a load."""
        return {
            "ui": self.ui_config().to_wire(),
            "isForm": self.is_form,
            "activeTab": self.active_tab_id,
        }

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> str:
        """Render the current state to markup. Does not modify the panel."""
        safe_id = html_module.escape(self.id)
        classes = ["flyout", f"flyout-{self.width}", f"flyout-{self.position}"]
        classes.extend(c for c in self.extra_classes if c not in classes)

        inner = self._render_body() + self._render_footer()
        if self.is_form:
            inner = f'<form class="flyout-form" novalidate>{inner}</form>'

        return (
            f'<div id="{safe_id}" class="{html_module.escape(" ".join(classes))}" '
            f'data-flyout-id="{safe_id}" role="dialog" aria-modal="true" '
            f'aria-labelledby="{safe_id}-title" tabindex="-1">'
            f'{self._render_header()}'
            f'{self._render_tabs()}'
            f'{inner}'
            f'</div>'
        )

    def _render_header(self) -> str:
        safe_id = html_module.escape(self.id)
        return (
            f'<div class="flyout-header">'
            f'<h2 id="{safe_id}-title" class="flyout-title">{html_module.escape(self.title)}</h2>'
            f'<button type="button" class="flyout-close" aria-label="Close">&times;</button>'
            f'</div>'
        )

    def _render_tabs(self) -> str:
        if not self.tabs or not self.show_tabs:
            return ""
        links = []
        for tab in self.tabs:
            is_active = tab.id == self.active_tab_id
            css = ["flyout-tab"]
            if is_active:
                css.append("active")
            if tab.disabled:
                css.append("disabled")
            safe_tab = html_module.escape(tab.id)
            icon = (
                f'<span class="flyout-tab-icon {html_module.escape(tab.icon)}" aria-hidden="true"></span>'
                if tab.icon else ""
            )
            badge = (
                f'<span class="flyout-tab-badge">{html_module.escape(str(tab.badge))}</span>'
                if tab.badge not in (None, "") else ""
            )
            disabled = ' aria-disabled="true"' if tab.disabled else ""
            links.append(
                f'<a href="#{html_module.escape(self.id)}-tab-{safe_tab}" '
                f'class="{" ".join(css)}" data-tab="{safe_tab}" role="tab" '
                f'aria-selected="{"true" if is_active else "false"}"{disabled}>'
                f'{icon}{html_module.escape(tab.label)}{badge}'
                f'</a>'
            )
        return f'<nav class="flyout-tabs" role="tablist">{"".join(links)}</nav>'

    def _render_body(self) -> str:
        safe_id = html_module.escape(self.id)
        if not self.tabs:
            return (
                f'<div class="flyout-body">'
                f'<div id="{safe_id}-tab-{MAIN}" class="flyout-tab-content active" data-tab="{MAIN}">'
                f'{self._render_entries(MAIN)}'
                f'</div>'
                f'</div>'
            )

        blocks = []
        for tab in self.tabs:
            safe_tab = html_module.escape(tab.id)
            active = " active" if tab.id == self.active_tab_id else ""
            blocks.append(
                f'<div id="{safe_id}-tab-{safe_tab}" class="flyout-tab-content{active}" '
                f'data-tab="{safe_tab}" role="tabpanel">'
                f'{self._render_entries(tab.id)}'
                f'</div>'
            )
        return f'<div class="flyout-body">{"".join(blocks)}</div>'

    def _render_entries(self, key: str) -> str:
        entries = self.content.get(key) or []
        markup = "".join(render_entry(entry) for entry in entries)
        if not markup:
            return self.empty_block(self.config.empty_content_message)
        return markup

    def _render_footer(self) -> str:
        if not self.footer:
            return ""
        return f'<div class="flyout-footer">{self.footer}</div>'

    @staticmethod
    def empty_block(message: str) -> str:
        """Standard placeholder for a tab without content."""
        return f'<div class="flyout-empty"><p>{html_module.escape(str(message))}</p></div>'
