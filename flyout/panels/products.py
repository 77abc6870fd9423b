# ============================================================================
# CLAUDE CONTEXT - PRODUCTS_PANEL
# ============================================================================
# STATUS: Host panel - Product editor backed by an in-memory store
# PURPOSE: Reference host: load/save/delete callbacks and the list display
# EXPORTS: Product, ProductStore, ProductHandler, register_product_panel,
#          render_products_table
# DEPENDENCIES: flyout.panel, flyout.handlers, flyout.shell
# ============================================================================
"""
Products panel.

A complete host for the flyout core: a tabbed edit form whose saves and
deletes go through the remote action surface, plus the list display that
Table Sync keeps up to date.

Tabs:
    - details: name, price and description fields (form)
    - stock: quantity field (form)
    - history: read-only summary

Exports:
    Product: Record dataclass
    ProductStore: In-memory persistence
    ProductHandler: PanelHandler implementation
    register_product_panel: Create and register the panel
    render_products_table: List display with trigger links
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, List, Optional
import html as html_module
import logging

from exceptions import DomainError
from flyout.dispatcher import RequestContext, parse_item_id
from flyout.handlers import PanelHandler
from flyout.panel import Panel
from flyout.registry import PanelRegistry
from flyout.shell import action_bar, default_actions, trigger_button, trigger_link

logger = logging.getLogger(__name__)

PANEL_ID = "product-editor"
ACTION_PREFIX = "products"
TABLE_HEADERS = ["Name", "Price", "Stock", "Actions"]


@dataclass
class Product:
    id: int
    name: str
    price: float = 0.0
    stock: int = 0
    description: str = ""
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ProductStore:
    """Thread-safe in-memory product store."""

    def __init__(self, products: Optional[List[Product]] = None):
        self._lock = Lock()
        self._products: Dict[int, Product] = {}
        self._next_id = 1
        for product in products or []:
            self._products[product.id] = product
            self._next_id = max(self._next_id, product.id + 1)

    def get(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)

    def all(self) -> List[Product]:
        return sorted(self._products.values(), key=lambda p: p.id)

    def upsert(self, product_id: Optional[int], name: str, price: float, stock: int, description: str) -> Product:
        with self._lock:
            if product_id is None:
                product_id = self._next_id
                self._next_id += 1
            product = Product(
                id=product_id,
                name=name,
                price=price,
                stock=stock,
                description=description,
            )
            self._products[product_id] = product
            return product

    def delete(self, product_id: int) -> bool:
        with self._lock:
            return self._products.pop(product_id, None) is not None


def _text_field(name: str, label: str, value: Any = "", required: bool = False, input_type: str = "text") -> str:
    required_attr = " required" if required else ""
    marker = ' <span class="required">*</span>' if required else ""
    return (
        f'<p class="flyout-field">'
        f'<label for="product-{name}">{html_module.escape(label)}{marker}</label>'
        f'<input type="{input_type}" id="product-{name}" name="{name}" '
        f'value="{html_module.escape(str(value))}"{required_attr}>'
        f'</p>'
    )


def _textarea(name: str, label: str, value: str = "") -> str:
    return (
        f'<p class="flyout-field">'
        f'<label for="product-{name}">{html_module.escape(label)}</label>'
        f'<textarea id="product-{name}" name="{name}">{html_module.escape(value)}</textarea>'
        f'</p>'
    )


def _parse_number(value: Any, cast, field_label: str):
    if value in (None, ""):
        return cast(0)
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise DomainError(f"{field_label} must be a number")


class ProductHandler(PanelHandler):
    """Load/save/delete callbacks for the product editor."""

    def __init__(self, store: ProductStore):
        self.store = store

    def on_load(self, panel, request):
        raw_id = request.payload.get("id") or request.payload.get("row_id")
        product = None
        if raw_id not in (None, ""):
            product = self.store.get(parse_item_id(raw_id))
            if product is None:
                return DomainError("Record not found")

        panel.set_title(f"Edit {product.name}" if product else "Add Product")
        panel.add_tab("details", "Details")
        panel.add_tab("stock", "Stock", badge=product.stock if product else None)
        panel.add_tab("history", "History", disabled=product is None)

        hidden_id = f'<input type="hidden" name="id" value="{product.id}">' if product else ""
        panel.add_content("details", hidden_id, form_fields=True)
        panel.add_content("details", _text_field("name", "Name", product.name if product else "", required=True))
        panel.add_content("details", _text_field("price", "Price", product.price if product else "", input_type="number"))
        panel.add_content("details", _textarea("description", "Description", product.description if product else ""))
        panel.add_content("stock", _text_field("stock", "Quantity", product.stock if product else 0, input_type="number"))
        if product:
            panel.add_content(
                "history",
                lambda: f'<p>Last updated {product.updated_at.strftime("%d %b %Y %H:%M")} UTC</p>',
            )

        actions = default_actions(self)
        if product is None:
            # Nothing to delete yet
            actions = [action for action in actions if action["kind"] != "delete"]
        panel.set_footer(action_bar(actions))
        return None

    def on_save(self, data):
        name = str(data.get("name") or "").strip()
        if not name:
            return DomainError("Name is required")
        raw_id = data.get("id")
        product_id = parse_item_id(raw_id) if raw_id not in (None, "") else None
        if product_id is not None and self.store.get(product_id) is None:
            return DomainError("Record not found")

        product = self.store.upsert(
            product_id,
            name=name,
            price=_parse_number(data.get("price"), float, "Price"),
            stock=_parse_number(data.get("stock"), int, "Quantity"),
            description=str(data.get("description") or ""),
        )
        logger.info(f"Saved product {product.id}")
        return product.id

    def on_delete(self, item_id):
        if not self.store.delete(item_id):
            return DomainError("Record not found")
        logger.info(f"Deleted product {item_id}")
        return True

    def on_row_markup(self, item_id):
        product = self.store.get(int(item_id))
        if product is None:
            return None
        return render_product_row(product)


def register_product_panel(registry: PanelRegistry, store: ProductStore) -> Panel:
    """Create the product editor panel and register it."""
    return Panel(
        PANEL_ID,
        "Product",
        width="large",
        action_prefix=ACTION_PREFIX,
        handler=ProductHandler(store),
        registry=registry,
    )


def render_product_row(product: Product, panel: Optional[Panel] = None, context: Optional[RequestContext] = None) -> str:
    """One list row. Trigger links are only rendered when a context is given."""
    if panel is not None and context is not None:
        actions = trigger_link(panel, context, "Edit", data={"id": product.id})
    else:
        actions = f'<a href="#" data-flyout-trigger="{PANEL_ID}" data-id="{product.id}">Edit</a>'
    return (
        f'<tr data-id="{product.id}">'
        f'<td>{html_module.escape(product.name)}</td>'
        f'<td>{product.price:.2f}</td>'
        f'<td>{product.stock}</td>'
        f'<td>{actions}</td>'
        f'</tr>'
    )


def render_products_table(store: ProductStore, panel: Panel, context: RequestContext, empty_message: str) -> str:
    """
    Render the list display kept in sync by the client runtime.
    """
    header_cells = "".join(f"<th>{html_module.escape(h)}</th>" for h in TABLE_HEADERS)
    rows = [render_product_row(p, panel, context) for p in store.all()]
    if not rows:
        rows = [
            f'<tr class="no-items"><td colspan="{len(TABLE_HEADERS)}">'
            f'{html_module.escape(empty_message)}</td></tr>'
        ]
    add_button = trigger_button(panel, context, "Add Product", css_class="button button-primary")
    return (
        f'<p>{add_button}</p>'
        f'<table class="list-table">'
        f'<thead><tr>{header_cells}</tr></thead>'
        f'<tbody>{"".join(rows)}</tbody>'
        f'</table>'
    )
