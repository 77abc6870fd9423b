# ============================================================================
# CLAUDE CONTEXT - FLYOUT_SHELL
# ============================================================================
# STATUS: UI chrome - Bootstrap script, trigger elements, footer actions
# PURPOSE: Render the page-level markup that connects the host page to panels
# EXPORTS: render_bootstrap_script, trigger_button, trigger_link, action_bar,
#          default_actions, render_page
# DEPENDENCIES: html, json, core.models.bootstrap
# ============================================================================
"""
Page shell helpers.

Host pages use these to deliver the client bootstrap and to place trigger
elements. Trigger elements carry the panel id in `data-flyout-trigger`, an
optional `data-flyout-action`, and any other `data-*` attributes as the
request payload (underscores in payload keys become hyphens).

Exports:
    render_bootstrap_script: <script> assigning window.flyoutConfig
    trigger_button: <button> trigger element
    trigger_link: <a> trigger element
    action_bar: Footer markup from action descriptors
    default_actions: Save / Delete / Cancel descriptors for a handler
    render_page: Minimal HTML document wrapping a list display
"""

from typing import Any, Dict, List, Optional
import html as html_module
import json

from config import __version__
from core.models.bootstrap import ClientBootstrap
from core.models.enums import PanelAction


def _data_attributes(data: Optional[Dict[str, Any]]) -> str:
    attrs = []
    for key, value in (data or {}).items():
        if value is None:
            continue
        name = str(key).replace("_", "-").lower()
        if name.startswith("flyout-"):
            continue
        attrs.append(f' data-{html_module.escape(name)}="{html_module.escape(str(value))}"')
    return "".join(attrs)


def render_bootstrap_script(bootstrap: ClientBootstrap) -> str:
    """
    Render the bootstrap bundle as a script assigning `window.flyoutConfig`.
    """
    payload = json.dumps(bootstrap.to_wire()).replace("</", "<\\/")
    return f'<script id="flyout-config">window.flyoutConfig = {payload};</script>'


def trigger_button(
    panel,
    context,
    text: str = "Open",
    data: Optional[Dict[str, Any]] = None,
    css_class: str = "button",
    icon: Optional[str] = None,
    action: Optional[str] = None,
) -> str:
    """
    Render a button that opens `panel`.

    Returns:
        Button markup, or "" when the caller lacks the panel's capability
    """
    if not context.can(panel.required_capability):
        return ""
    icon_html = (
        f'<span class="{html_module.escape(icon)}" aria-hidden="true"></span> '
        if icon else ""
    )
    action_attr = f' data-flyout-action="{html_module.escape(action)}"' if action else ""
    return (
        f'<button type="button" class="{html_module.escape(css_class)}" '
        f'data-flyout-trigger="{html_module.escape(panel.id)}"{action_attr}'
        f'{_data_attributes(data)}>'
        f'{icon_html}{html_module.escape(text)}'
        f'</button>'
    )


def trigger_link(
    panel,
    context,
    text: str,
    data: Optional[Dict[str, Any]] = None,
    css_class: str = "",
    action: Optional[str] = None,
) -> str:
    """
    Render a link that opens `panel`.

    Returns:
        Link markup, or "" when the caller lacks the panel's capability
    """
    if not context.can(panel.required_capability):
        return ""
    class_attr = f' class="{html_module.escape(css_class)}"' if css_class else ""
    action_attr = f' data-flyout-action="{html_module.escape(action)}"' if action else ""
    return (
        f'<a href="#"{class_attr} '
        f'data-flyout-trigger="{html_module.escape(panel.id)}"{action_attr}'
        f'{_data_attributes(data)}>'
        f'{html_module.escape(text)}'
        f'</a>'
    )


def default_actions(handler) -> List[Dict[str, Any]]:
    """
    Footer action descriptors for a handler.

    Save and Cancel are always present; Delete only when the handler
    supports deleting.
    """
    actions = [{"text": "Save", "style": "primary", "kind": "save"}]
    if handler is not None and handler.supports(PanelAction.DELETE):
        actions.append({"text": "Delete", "style": "link-delete", "kind": "delete"})
    actions.append({"text": "Cancel", "style": "secondary", "kind": "cancel"})
    return actions


def action_bar(actions: List[Dict[str, Any]]) -> str:
    """
    Render footer actions.

    Each descriptor has `text`, `kind` (save, delete, cancel or custom) and
    optional `style` and `data`.
    """
    buttons = []
    for action in actions:
        kind = action.get("kind", "")
        text = html_module.escape(str(action.get("text", "")))
        style = html_module.escape(str(action.get("style", "secondary")))
        data = _data_attributes(action.get("data"))
        if kind == "save":
            buttons.append(
                f'<button type="submit" class="button button-{style} flyout-save"{data}>{text}</button>'
            )
        elif kind == "delete":
            buttons.append(
                f'<button type="button" class="button button-{style} flyout-delete"{data}>{text}</button>'
            )
        elif kind == "cancel":
            buttons.append(
                f'<button type="button" class="button button-{style} flyout-cancel"{data}>{text}</button>'
            )
        else:
            css = html_module.escape(str(kind))
            buttons.append(
                f'<button type="button" class="button button-{style} flyout-action-{css}"{data}>{text}</button>'
            )
    return f'<div class="flyout-actions">{"".join(buttons)}</div>'


def render_page(title: str, body_html: str, bootstrap: ClientBootstrap) -> str:
    """
    Render a minimal admin page: notices anchor, body content, bootstrap.
    """
    safe_title = html_module.escape(title)
    return (
        f'<!DOCTYPE html>'
        f'<html lang="en"><head><meta charset="utf-8">'
        f'<title>{safe_title}</title>'
        f'<meta name="generator" content="flyout {html_module.escape(__version__)}">'
        f'</head><body>'
        f'<div class="wrap"><h1>{safe_title}</h1>'
        f'<div class="flyout-notices"></div>'
        f'{body_html}'
        f'</div>'
        f'{render_bootstrap_script(bootstrap)}'
        f'</body></html>'
    )
