"""
Host panels.

Exports:
    register_product_panel: Product editor panel
    ProductStore: In-memory store backing it
"""

from flyout.panels.products import (
    ProductHandler,
    ProductStore,
    register_product_panel,
    render_products_table,
)

__all__ = [
    'ProductHandler',
    'ProductStore',
    'register_product_panel',
    'render_products_table',
]
