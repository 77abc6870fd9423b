"""
Page shell tests: bootstrap script, trigger markup, footer actions.
"""

import json

import pytest
from bs4 import BeautifulSoup

from flyout import CallbackHandler, Panel, PanelRegistry
from flyout.shell import (
    action_bar,
    default_actions,
    render_bootstrap_script,
    render_page,
    trigger_button,
    trigger_link,
)
from tests.factories.flyout_factories import RecordingHandler, make_context, make_flyout_config, make_issuer


@pytest.fixture
def panel():
    return Panel("editor", action_prefix="things", handler=RecordingHandler(), config=make_flyout_config())


def _first(markup, selector):
    return BeautifulSoup(markup, "html.parser").select_one(selector)


class TestTriggers:

    def test_button_carries_trigger_and_payload(self, panel):
        markup = trigger_button(panel, make_context(), "Edit", data={"id": 7, "row_kind": "main", "skip": None})
        button = _first(markup, "button")
        assert button["data-flyout-trigger"] == "editor"
        assert button["data-id"] == "7"
        assert button["data-row-kind"] == "main"
        assert not button.has_attr("data-skip")
        assert button.get_text() == "Edit"

    def test_payload_cannot_spoof_trigger_attributes(self, panel):
        markup = trigger_link(panel, make_context(), "x", data={"flyout_trigger": "other"})
        assert _first(markup, "a")["data-flyout-trigger"] == "editor"

    def test_action_attribute(self, panel):
        link = _first(trigger_link(panel, make_context(), "Delete", action="delete"), "a")
        assert link["data-flyout-action"] == "delete"

    def test_hidden_without_capability(self, panel):
        context = make_context("read")
        assert trigger_button(panel, context, "Edit") == ""
        assert trigger_link(panel, context, "Edit") == ""

    def test_text_is_escaped(self, panel):
        assert "<script>" not in trigger_button(panel, make_context(), "<script>")


class TestActions:

    def test_default_actions_with_delete(self):
        kinds = [a["kind"] for a in default_actions(RecordingHandler())]
        assert kinds == ["save", "delete", "cancel"]

    def test_default_actions_without_delete(self):
        handler = CallbackHandler(load=lambda panel, request: None, save=lambda data: 1)
        assert [a["kind"] for a in default_actions(handler)] == ["save", "cancel"]

    def test_action_bar_classes(self):
        markup = action_bar(default_actions(RecordingHandler()) + [{"text": "Duplicate", "kind": "duplicate"}])
        soup = BeautifulSoup(markup, "html.parser")
        assert soup.select_one("div.flyout-actions") is not None
        assert soup.select_one("button.flyout-save")["type"] == "submit"
        assert soup.select_one("button.flyout-delete")["type"] == "button"
        assert soup.select_one("button.flyout-cancel") is not None
        assert soup.select_one("button.flyout-action-duplicate") is not None


class TestBootstrap:

    def test_script_assigns_window_config(self, panel):
        registry = PanelRegistry(make_flyout_config())
        registry.register(panel)
        script = render_bootstrap_script(registry.build_bootstrap(make_issuer()))
        assert script.startswith('<script id="flyout-config">window.flyoutConfig = ')
        payload = script[len('<script id="flyout-config">window.flyoutConfig = '):-len(";</script>")]
        assert json.loads(payload)["flyouts"]["editor"]["ajax"]["loadAction"] == "things_load"

    def test_script_keys_match_client_contract(self, panel):
        registry = PanelRegistry(make_flyout_config())
        registry.register(panel)
        script = render_bootstrap_script(registry.build_bootstrap(make_issuer()))
        payload = json.loads(script[len('<script id="flyout-config">window.flyoutConfig = '):-len(";</script>")])
        assert set(payload) == {"ajaxUrl", "flyouts", "i18n"}
        assert payload["i18n"]["noItems"] == "No items found"

    def test_script_cannot_be_closed_by_content(self, panel):
        from config import ClientMessages
        registry = PanelRegistry(make_flyout_config())
        registry.register(panel)
        bootstrap = registry.build_bootstrap(make_issuer(), messages=ClientMessages(error="</script><b>"))
        script = render_bootstrap_script(bootstrap)
        assert script.count("</script>") == 1

    def test_page_has_notice_anchor(self, panel):
        registry = PanelRegistry(make_flyout_config())
        registry.register(panel)
        page = render_page("Things", "<table class='list-table'></table>", registry.build_bootstrap(make_issuer()))
        soup = BeautifulSoup(page, "html.parser")
        assert soup.select_one(".flyout-notices") is not None
        assert soup.select_one("#flyout-config") is not None
        assert soup.title.get_text() == "Things"
