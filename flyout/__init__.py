# ============================================================================
# CLAUDE CONTEXT - FLYOUT_MODULE
# ============================================================================
# STATUS: Package - Server-side slide-out panels
# PURPOSE: Panel model, registry, tokens, dispatcher and HTTP entry point
# EXPORTS: Panel, Tab, PanelRegistry, PanelHandler, CallbackHandler,
#          ActionDispatcher, RequestContext, HmacTokenIssuer, make_ajax_handler
# DEPENDENCIES: azure.functions, pydantic
# ============================================================================
"""
Server-side flyout panels.

Route registration:
    make_ajax_handler() returns a handler that should be called from
    function_app.py's @app.route(route="flyout", methods=["POST"]).

Exports:
    Panel, Tab: Panel model
    PanelRegistry: Request-scoped registry
    PanelHandler, CallbackHandler: Host callback contract
    ActionDispatcher, RequestContext: Remote action dispatch
    HmacTokenIssuer: Prefix-scoped tokens
    make_ajax_handler: Build the HTTP handler function
"""

from typing import Callable

import azure.functions as func

from flyout.content import Renderable
from flyout.dispatcher import ActionDispatcher, RequestContext
from flyout.handlers import CallbackHandler, PanelHandler
from flyout.http import ContextProvider, DispatcherProvider, FlyoutAjaxTrigger
from flyout.panel import Panel, Tab
from flyout.registry import PanelRegistry
from flyout.tokens import HmacTokenIssuer


def make_ajax_handler(
    context_provider: ContextProvider,
    dispatcher_provider: DispatcherProvider,
) -> Callable[[func.HttpRequest], func.HttpResponse]:
    """
    Build the HTTP handler for the remote action surface.

    Args:
        context_provider: req -> RequestContext (caller identity, capabilities)
        dispatcher_provider: (req, context) -> ActionDispatcher for this request

    Returns:
        Function taking an HttpRequest and returning the JSON envelope response
    """
    return FlyoutAjaxTrigger(context_provider, dispatcher_provider).handle_request


__all__ = [
    'ActionDispatcher',
    'CallbackHandler',
    'HmacTokenIssuer',
    'Panel',
    'PanelHandler',
    'PanelRegistry',
    'Renderable',
    'RequestContext',
    'Tab',
    'make_ajax_handler',
]
