"""
Headless document tests - queries, mutation, forms and delegated events.
"""

import asyncio

import pytest

from flyout_client.document import ClientDocument, DomEvent

PAGE = (
    '<html><body>'
    '<div id="outer" class="box">'
    '<div id="inner" data-flyout-id="p"><button id="btn" class="go">Go</button></div>'
    '</div>'
    '</body></html>'
)

FORM = (
    '<form id="f">'
    '<input type="hidden" name="id" value="5">'
    '<input name="title" value="Widget">'
    '<input name="off" value="x" disabled>'
    '<input type="checkbox" name="tags" value="a" checked>'
    '<input type="checkbox" name="tags" value="b" checked>'
    '<input type="checkbox" name="skip" value="c">'
    '<input type="radio" name="size" value="s">'
    '<input type="radio" name="size" value="m" checked>'
    '<select name="color"><option value="r">Red</option><option value="g" selected>Green</option></select>'
    '<textarea name="notes">Hello</textarea>'
    '<input type="submit" name="go" value="Save">'
    '</form>'
)


@pytest.fixture
def doc():
    return ClientDocument(PAGE)


class TestQueries:

    def test_missing_body_is_created(self):
        assert ClientDocument("<p>fragment</p>").body is not None

    def test_closest(self, doc):
        button = doc.get_by_id("btn")
        assert ClientDocument.closest(button, "[data-flyout-id]") is doc.get_by_id("inner")
        assert ClientDocument.closest(button, ".go") is button
        assert ClientDocument.closest(button, ".missing") is None

    def test_contains_after_remove(self, doc):
        inner = doc.get_by_id("inner")
        assert doc.contains(inner)
        doc.remove(inner)
        assert not doc.contains(inner)
        assert doc.get_by_id("btn") is None


class TestMutation:

    def test_class_helpers(self, doc):
        outer = doc.get_by_id("outer")
        doc.add_class(outer, "active")
        doc.add_class(outer, "active")
        assert doc.classes(outer) == ["box", "active"]
        doc.toggle_class(outer, "active", False)
        doc.remove_class(outer, "box")
        assert not outer.has_attr("class")

    def test_append_prepend_replace(self, doc):
        outer = doc.get_by_id("outer")
        first = doc.prepend_markup('<span id="a"></span><span id="b"></span>', outer)
        assert first["id"] == "a"
        assert [c.get("id") for c in outer.find_all(recursive=False)] == ["a", "b", "inner"]

        replacement = doc.replace_with_markup(doc.get_by_id("b"), '<em id="c"></em>')
        assert replacement["id"] == "c"
        assert [c.get("id") for c in outer.find_all(recursive=False)] == ["a", "c", "inner"]

        appended = doc.append_markup('<div id="tail"></div>')
        assert appended.parent is doc.body

    def test_remove_clears_focus_inside(self, doc):
        doc.focus(doc.get_by_id("btn"))
        doc.remove(doc.get_by_id("outer"))
        assert doc.focused is None

    def test_removing_identical_sibling_keeps_focus(self):
        doc = ClientDocument(
            '<html><body><div class="box"><button>Go</button></div>'
            '<div class="box"><button>Go</button></div></body></html>'
        )
        first, second = doc.select("div.box")
        doc.focus(second.button)
        doc.remove(first)
        assert doc.focused is second.button


class TestForms:

    def test_serialize_successful_controls(self):
        doc = ClientDocument(f"<html><body>{FORM}</body></html>")
        assert doc.serialize_form(doc.get_by_id("f")) == {
            "id": "5",
            "title": "Widget",
            "tags": ["a", "b"],
            "size": "m",
            "color": "g",
            "notes": "Hello",
        }

    def test_set_value(self):
        doc = ClientDocument(f"<html><body>{FORM}</body></html>")
        doc.set_value(doc.select_one("select"), "r")
        doc.set_value(doc.select_one("textarea"), "Bye")
        data = doc.serialize_form(doc.get_by_id("f"))
        assert data["color"] == "r"
        assert data["notes"] == "Bye"

    def test_first_focusable_skips_hidden_and_disabled(self):
        doc = ClientDocument(
            '<html><body><div id="r">'
            '<input type="hidden" name="a"><input name="b" disabled><select name="c"></select>'
            '</div></body></html>'
        )
        assert doc.first_focusable(doc.get_by_id("r"))["name"] == "c"


class TestEvents:

    def test_bubbling_order(self, doc):
        seen = []
        doc.on("click", "#outer", lambda e, n: seen.append("outer"))
        doc.on("click", ".go", lambda e, n: seen.append("button"))
        doc.on("click", None, lambda e, n: seen.append("document"))
        doc.on("click", "#inner", lambda e, n: seen.append("inner"))
        doc.click(doc.get_by_id("btn"))
        assert seen == ["button", "inner", "outer", "document"]

    def test_stop_propagation(self, doc):
        seen = []

        def stop(event, node):
            event.stop_propagation()
            seen.append("inner")

        doc.on("click", "#inner", stop)
        doc.on("click", "#outer", lambda e, n: seen.append("outer"))
        doc.click(doc.get_by_id("btn"))
        assert seen == ["inner"]

    def test_handler_receives_matched_node(self, doc):
        matched = []
        doc.on("click", "[data-flyout-id]", lambda e, n: matched.append(n))
        doc.click(doc.get_by_id("btn"))
        assert matched == [doc.get_by_id("inner")]

    def test_off_by_namespace(self, doc):
        seen = []
        doc.on("click", ".go", lambda e, n: seen.append(1), namespace="flyout.p")
        listener = doc.on("click", ".go", lambda e, n: seen.append(2), namespace="other")
        assert doc.off("flyout.p") == 1
        assert doc.listener_count("other") == 1
        doc.click(doc.get_by_id("btn"))
        assert seen == [2]
        assert doc.off(listener_id=listener) == 1
        assert doc.listener_count() == 0

    def test_listener_removed_during_dispatch_does_not_run(self, doc):
        seen = []
        doc.on("click", ".go", lambda e, n: doc.off("late"))
        doc.on("click", "#outer", lambda e, n: seen.append("late"), namespace="late")
        doc.click(doc.get_by_id("btn"))
        assert seen == []

    def test_coroutine_handlers_become_tasks(self, doc):
        async def handler(event, node):
            return event.key

        async def scenario():
            doc.on("keydown", None, handler)
            tasks = doc.keydown("Escape")
            return await asyncio.gather(*tasks)

        assert asyncio.run(scenario()) == ["Escape"]

    def test_input_sets_value(self, doc):
        doc.append_markup('<input id="field" name="f">')
        events = []
        doc.on("input", "#field", lambda e, n: events.append(e))
        doc.input(doc.get_by_id("field"), "typed")
        assert doc.get_by_id("field")["value"] == "typed"
        assert isinstance(events[0], DomEvent)

    def test_prevent_default(self, doc):
        doc.on("click", ".go", lambda e, n: e.prevent_default())
        event = DomEvent("click", doc.get_by_id("btn"))
        doc.dispatch(event)
        assert event.default_prevented
