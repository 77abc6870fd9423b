"""
Azure Functions entry point for the flyout panel admin.

Hosts the remote action surface that slide-out panels talk to, plus a
products list page that renders the trigger buttons, the list table and
the client bootstrap bundle.

Architecture:
    Browser/Client -> POST /api/flyout -> FlyoutAjaxTrigger -> ActionDispatcher
                                                                  |
                                           PanelRegistry (per request) -> PanelHandler
                                                                  |
                                                    ResponseEnvelope {ok, data | error}

Per request:
    - a RequestContext is derived from the caller's headers (session,
      capability claims, principal)
    - a fresh PanelRegistry is populated with the host panels
    - tokens are issued/verified by an HmacTokenIssuer bound to the session

Exports:
    app: Azure Function App instance
    product_store: Demo data store backing the products panel

Dependencies:
    azure.functions: Azure Functions SDK
    flyout: Panel model, registry, dispatcher, HTTP trigger
    config: get_config() singleton

Endpoints:
    POST /api/flyout - Remote panel actions (load / save / delete)
    GET  /api/admin/products - Products list page with flyout triggers
    GET  /api/livez - Liveness probe

Environment Variables:
    FLYOUT_TOKEN_SECRET: HMAC secret for per-prefix tokens (required)
    FLYOUT_AJAX_URL: Remote action URL delivered to the client
    FLYOUT_DEFAULT_CAPABILITY: Capability required by panels by default
    DEBUG_MODE: Verbose diagnostics
"""

# ========================================================================
# IMPORTS - Categorized by source for maintainability
# ========================================================================

# Native Python modules
import json
import logging
from datetime import datetime, timezone

# Azure SDK modules (3rd party - Microsoft)
import azure.functions as func

# Suppress Azure SDK HTTP logging
logging.getLogger("azure.core.pipeline.policies.http_logging_policy").setLevel(logging.WARNING)
logging.getLogger("azure.core").setLevel(logging.WARNING)

# Application modules (our code)
from config import get_config, debug_config, __version__
from flyout import ActionDispatcher, HmacTokenIssuer, PanelRegistry, RequestContext, make_ajax_handler
from flyout.panels import ProductStore, register_product_panel, render_products_table
from flyout.shell import render_page
from util_logger import LoggerFactory
from util_logger import ComponentType

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "function_app")

# ========================================================================
# REQUEST IDENTITY
# ========================================================================
# Identity comes from the platform's authentication layer. App Service
# authentication forwards the principal in X-MS-CLIENT-PRINCIPAL-NAME; the
# session and capability claims are forwarded by the admin front end.
# ========================================================================

SESSION_HEADER = "X-Flyout-Session"
CAPABILITIES_HEADER = "X-Flyout-Capabilities"
PRINCIPAL_HEADER = "X-MS-CLIENT-PRINCIPAL-NAME"

# Demo data store - lives for the lifetime of the worker process
product_store = ProductStore()


def request_context(req: func.HttpRequest) -> RequestContext:
    """Derive the caller's RequestContext from request headers."""
    capabilities = frozenset(
        claim.strip()
        for claim in (req.headers.get(CAPABILITIES_HEADER) or "").split(",")
        if claim.strip()
    )
    return RequestContext(
        capabilities=capabilities,
        user_id=req.headers.get(PRINCIPAL_HEADER),
    )


def session_id(req: func.HttpRequest) -> str:
    return req.headers.get(SESSION_HEADER) or "anonymous"


def build_registry() -> PanelRegistry:
    """Populate a request-scoped registry with the host panels."""
    registry = PanelRegistry()
    register_product_panel(registry, product_store)
    return registry


def build_dispatcher(req: func.HttpRequest, context: RequestContext) -> ActionDispatcher:
    return ActionDispatcher(
        registry=build_registry(),
        token_verifier=HmacTokenIssuer.from_config(session_id(req)),
    )


# Initialize function app with HTTP auth level
app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

flyout_handler = make_ajax_handler(request_context, build_dispatcher)

logger.info(f"Flyout function app initialized (version {__version__})")


# ============================================================================
# REMOTE PANEL ACTIONS
# ============================================================================

@app.route(route="flyout", methods=["POST"])
def flyout_action(req: func.HttpRequest) -> func.HttpResponse:
    """
    Remote panel action endpoint.

    POST /api/flyout

    Body (form-encoded or JSON):
        action: "{prefix}_load" | "{prefix}_save" | "{prefix}_delete"
        token: Per-prefix token from the client bootstrap
        ...: Free-form payload (e.g. id, form fields)

    Returns:
        {"ok": true, "data": {...}} or {"ok": false, "error": "...", "code": "..."}
    """
    return flyout_handler(req)


# ============================================================================
# ADMIN PAGES
# ============================================================================

@app.route(route="admin/products", methods=["GET"])
def products_page(req: func.HttpRequest) -> func.HttpResponse:
    """
    Products list page.

    GET /api/admin/products

    Renders the list table (with edit/delete triggers for callers holding
    the panel capability) and the window.flyoutConfig bootstrap script.
    """
    context = request_context(req)
    registry = build_registry()
    issuer = HmacTokenIssuer.from_config(session_id(req))
    panel = registry.get("product-editor")

    body = render_products_table(
        product_store,
        panel,
        context,
        empty_message=get_config().client.messages.no_items,
    )
    page = render_page("Products", body, registry.build_bootstrap(issuer))
    return func.HttpResponse(page, status_code=200, mimetype="text/html")


# ============================================================================
# PROBES
# ============================================================================

@app.route(route="livez", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def livez(req: func.HttpRequest) -> func.HttpResponse:
    """Liveness probe - is the app alive? No dependencies checked."""
    body = {
        "status": "alive",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if get_config().debug_mode:
        body["config"] = debug_config()
    return func.HttpResponse(json.dumps(body), status_code=200, mimetype="application/json")
