"""
Event bus, trigger command and notice tests.
"""

import asyncio

import pytest
from bs4 import BeautifulSoup

from core.models.enums import PanelAction
from exceptions import ContractViolationError
from flyout_client import ClientDocument, EventBus, ItemSaved, PanelClosed, PanelEvent, PanelOpened
from flyout_client.commands import TriggerCommand
from flyout_client.notices import NoticeManager
from tests.factories.flyout_factories import fast_client_config


class TestEventBus:

    def test_base_class_subscription(self):
        bus = EventBus()
        seen = []
        bus.subscribe(PanelEvent, seen.append)
        bus.publish(PanelOpened("a"))
        bus.publish(ItemSaved("a", 3))
        assert seen == [PanelOpened("a"), ItemSaved("a", 3)]

    def test_exact_subscription(self):
        bus = EventBus()
        seen = []
        bus.subscribe(PanelClosed, seen.append)
        bus.publish(PanelOpened("a"))
        bus.publish(PanelClosed("a"))
        assert seen == [PanelClosed("a")]

    def test_unsubscribe_is_idempotent(self):
        bus = EventBus()
        seen = []
        unsubscribe = bus.subscribe(PanelOpened, seen.append)
        unsubscribe()
        unsubscribe()
        bus.publish(PanelOpened("a"))
        assert seen == []

    def test_failing_handler_does_not_stop_delivery(self):
        bus = EventBus()
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(PanelOpened, broken)
        bus.subscribe(PanelOpened, seen.append)
        bus.publish(PanelOpened("a"))
        assert seen == [PanelOpened("a")]

    def test_history_is_bounded(self):
        bus = EventBus(history_size=2)
        for name in ("a", "b", "c"):
            bus.publish(PanelOpened(name))
        assert bus.events_of(PanelOpened) == [PanelOpened("b"), PanelOpened("c")]


def _element(markup):
    return BeautifulSoup(markup, "html.parser").select_one("[data-flyout-trigger]")


class TestTriggerCommand:

    def test_defaults_to_load(self):
        command = TriggerCommand.from_element(_element('<a data-flyout-trigger="p">x</a>'))
        assert command == TriggerCommand("p", PanelAction.LOAD, {})

    def test_payload_from_data_attributes(self):
        command = TriggerCommand.from_element(_element(
            '<button data-flyout-trigger="p" data-flyout-action="Delete" data-id="7" data-row-kind="main">x</button>'
        ))
        assert command.action == PanelAction.DELETE
        assert command.payload == {"id": "7", "row_kind": "main"}
        assert command.item_id == "7"

    def test_enclosing_row_id(self):
        command = TriggerCommand.from_element(_element(
            '<table><tr data-id="12"><td><a data-flyout-trigger="p">x</a></td></tr></table>'
        ))
        assert command.payload == {"row_id": "12"}
        assert command.item_id == "12"

    def test_unknown_action(self):
        with pytest.raises(ValueError):
            TriggerCommand.from_element(_element('<a data-flyout-trigger="p" data-flyout-action="nuke">x</a>'))

    def test_empty_trigger(self):
        with pytest.raises(ContractViolationError):
            TriggerCommand.from_element(_element('<a data-flyout-trigger="">x</a>'))


class TestNotices:

    def _notices(self, page='<html><body><div class="flyout-notices"></div></body></html>'):
        doc = ClientDocument(page)
        return doc, NoticeManager(doc, fast_client_config())

    def test_page_notice_in_anchor(self):
        async def scenario():
            doc, notices = self._notices()
            notices.page_notice("Saved", "success")
            notice = doc.select_one(".flyout-notices > .notice.notice-success")
            assert notice.get_text() == "Saved"
            await asyncio.sleep(0.06)
            assert doc.select(".notice") == []

        asyncio.run(scenario())

    def test_error_notice_stays(self):
        async def scenario():
            doc, notices = self._notices()
            notices.page_notice("<b>Failed</b>", "error")
            await asyncio.sleep(0.06)
            notice = doc.select_one(".notice-error")
            assert notice.get_text() == "<b>Failed</b>"

        asyncio.run(scenario())

    def test_falls_back_to_body_and_info(self):
        async def scenario():
            doc, notices = self._notices("<html><body><p>x</p></body></html>")
            notice = notices.page_notice("Hi", "shout")
            assert notice.parent is doc.body
            assert "notice-info" in notice["class"]

        asyncio.run(scenario())

    def test_form_notice_replaces_previous(self):
        async def scenario():
            doc, notices = self._notices(
                '<html><body><div id="p"><div class="flyout-body"><p>x</p></div></div></body></html>'
            )
            panel = doc.get_by_id("p")
            notices.form_notice(panel, "first")
            notices.form_notice(panel, "second", "success")
            found = doc.select(".flyout-form-notice", panel)
            assert [n.get_text() for n in found] == ["second"]
            assert found[0].parent is doc.select_one(".flyout-body", panel)

        asyncio.run(scenario())
