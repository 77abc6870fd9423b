"""
Products panel tests: the reference host driven through the dispatcher.
"""

import pytest
from bs4 import BeautifulSoup

from core.errors import ErrorCode
from core.models.envelope import RequestEnvelope
from flyout import ActionDispatcher, PanelRegistry
from flyout.panels import ProductStore, register_product_panel, render_products_table
from flyout.panels.products import TABLE_HEADERS
from tests.factories.flyout_factories import make_context, make_flyout_config, make_issuer, make_products


@pytest.fixture
def store():
    return ProductStore(make_products(2))


@pytest.fixture
def setup(store):
    registry = PanelRegistry(make_flyout_config())
    panel = register_product_panel(registry, store)
    issuer = make_issuer()
    dispatcher = ActionDispatcher(registry, issuer, make_flyout_config())

    def call(kind, **payload):
        request = RequestEnvelope(action=f"products_{kind}", token=issuer.issue("products"), payload=payload)
        return dispatcher.dispatch(request, make_context())

    return panel, call


class TestProductLoad:

    def test_new_product_form(self, setup):
        panel, call = setup
        response = call("load")
        soup = BeautifulSoup(response.data["markup"], "html.parser")
        assert soup.select_one("form.flyout-form") is not None
        assert soup.select_one("input[name=name][required]") is not None
        assert soup.select_one("input[name=id]") is None
        assert soup.select_one("button.flyout-delete") is None
        history = soup.select_one('a.flyout-tab[data-tab="history"]')
        assert "disabled" in history["class"]

    def test_existing_product(self, setup, store):
        panel, call = setup
        product = store.get(2)
        response = call("load", id="2")
        soup = BeautifulSoup(response.data["markup"], "html.parser")
        assert soup.select_one("input[name=id]")["value"] == "2"
        assert soup.select_one("input[name=name]")["value"] == product.name
        assert soup.select_one("button.flyout-delete") is not None
        assert soup.select_one('a.flyout-tab[data-tab="stock"] .flyout-tab-badge').get_text() == str(product.stock)
        assert "Last updated" in soup.select_one("#product-editor-tab-history").get_text()

    def test_row_id_accepted(self, setup):
        panel, call = setup
        response = call("load", row_id="1")
        assert response.ok is True
        assert 'value="1"' in response.data["markup"]

    def test_unknown_product(self, setup):
        panel, call = setup
        response = call("load", id="99")
        assert response.ok is False
        assert response.error == "Record not found"


class TestProductSaveDelete:

    def test_create(self, setup, store):
        panel, call = setup
        response = call("save", name="Gadget", price="9.5", stock="3")
        assert response.ok is True
        assert response.data["id"] == 3
        assert store.get(3).price == 9.5
        assert 'data-id="3"' in response.data["rowMarkup"]

    def test_update(self, setup, store):
        panel, call = setup
        response = call("save", id="1", name="Renamed")
        assert response.data["id"] == 1
        assert store.get(1).name == "Renamed"

    def test_name_required(self, setup):
        panel, call = setup
        response = call("save", name="  ")
        assert response.error == "Name is required"

    def test_bad_number(self, setup):
        panel, call = setup
        response = call("save", name="X", price="cheap")
        assert response.error == "Price must be a number"

    def test_delete(self, setup, store):
        panel, call = setup
        response = call("delete", id="1")
        assert response.ok is True
        assert store.get(1) is None
        again = call("delete", id="1")
        assert again.error_code == ErrorCode.DOMAIN_ERROR


class TestProductsTable:

    def test_rows_and_triggers(self, setup, store):
        panel, call = setup
        soup = BeautifulSoup(render_products_table(store, panel, make_context(), "No items"), "html.parser")
        rows = soup.select("table.list-table tbody tr")
        assert [r["data-id"] for r in rows] == ["1", "2"]
        assert rows[0].select_one("[data-flyout-trigger=product-editor]")["data-id"] == "1"
        assert len(soup.select("thead th")) == len(TABLE_HEADERS)

    def test_empty_state_row(self, setup):
        panel, call = setup
        soup = BeautifulSoup(render_products_table(ProductStore(), panel, make_context(), "Nothing"), "html.parser")
        empty = soup.select_one("tr.no-items td")
        assert empty["colspan"] == str(len(TABLE_HEADERS))
        assert empty.get_text() == "Nothing"
