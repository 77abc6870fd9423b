"""
Client document model.

A BeautifulSoup tree standing in for the browser page, plus the pieces of
browser behavior the panel runtime relies on: delegated event listeners
with bubbling, focus tracking, class helpers and form serialization.

Listeners are registered with a CSS selector and an optional namespace.
Dispatching an event walks from the target up to the root; at each node,
listeners whose selector matches that node run in registration order.
Coroutine handlers are scheduled on the running loop and the resulting
tasks are returned to the caller.

Exports:
    ClientDocument: Document wrapper
    DomEvent: Event passed to listeners
"""

from dataclasses import dataclass, field
from itertools import count
from typing import Any, Callable, Dict, List, Optional
import asyncio
import inspect

from bs4 import BeautifulSoup, Tag

from util_logger import LoggerFactory, ComponentType

DEFAULT_PAGE = "<html><head></head><body></body></html>"

FOCUSABLE = "input:not([type=hidden]), select, textarea, button, a[href], [tabindex]"


@dataclass
class DomEvent:
    """Event delivered to listeners."""

    type: str
    target: Tag
    key: Optional[str] = None
    detail: Dict[str, Any] = field(default_factory=dict)
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


@dataclass
class _Listener:
    id: int
    event_type: str
    selector: Optional[str]
    handler: Callable[[DomEvent, Tag], Any]
    namespace: Optional[str]


class ClientDocument:
    """
    Headless page.

    Example:
        doc = ClientDocument('<html><body><table class="list-table">...</table></body></html>')
        doc.on("click", "[data-flyout-trigger]", on_trigger, namespace="flyout")
        tasks = doc.click(doc.select_one("[data-flyout-trigger]"))
    """

    def __init__(self, html: str = DEFAULT_PAGE):
        self.soup = BeautifulSoup(html, "html.parser")
        if self.soup.body is None:
            body = self.soup.new_tag("body")
            (self.soup.html or self.soup).append(body)
        self.focused: Optional[Tag] = None
        self._listeners: List[_Listener] = []
        self._ids = count(1)
        self.logger = LoggerFactory.create_logger(ComponentType.CLIENT, "ClientDocument")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def body(self) -> Tag:
        return self.soup.body

    def select(self, selector: str, root: Optional[Tag] = None) -> List[Tag]:
        return list((root or self.soup).select(selector))

    def select_one(self, selector: str, root: Optional[Tag] = None) -> Optional[Tag]:
        return (root or self.soup).select_one(selector)

    def get_by_id(self, element_id: str) -> Optional[Tag]:
        return self.soup.find(id=element_id)

    def contains(self, tag: Optional[Tag]) -> bool:
        """True when tag is attached to this document."""
        node = tag
        while node is not None:
            if node is self.soup:
                return True
            node = node.parent
        return False

    @staticmethod
    def matches(tag: Tag, selector: str) -> bool:
        return isinstance(tag, Tag) and tag.css.match(selector)

    @staticmethod
    def closest(tag: Tag, selector: str) -> Optional[Tag]:
        node = tag
        while isinstance(node, Tag) and node.name != "[document]":
            if node.css.match(selector):
                return node
            node = node.parent
        return None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def parse_fragment(self, markup: str) -> List[Any]:
        """Parse markup into detached nodes."""
        fragment = BeautifulSoup(markup or "", "html.parser")
        return list(fragment.contents)

    def append_markup(self, markup: str, parent: Optional[Tag] = None) -> Optional[Tag]:
        """Append markup to parent (default body); return the first element."""
        return self._insert_markup(markup, parent or self.body, at_start=False)

    def prepend_markup(self, markup: str, parent: Tag) -> Optional[Tag]:
        """Insert markup as the first children of parent; return the first element."""
        return self._insert_markup(markup, parent, at_start=True)

    def replace_with_markup(self, tag: Tag, markup: str) -> Optional[Tag]:
        """Replace tag by the parsed markup; return the first element."""
        nodes = self.parse_fragment(markup)
        first = next((n for n in nodes if isinstance(n, Tag)), None)
        anchor = tag
        for node in nodes:
            anchor.insert_after(node)
            anchor = node
        self.remove(tag)
        return first

    def _insert_markup(self, markup: str, parent: Tag, at_start: bool) -> Optional[Tag]:
        nodes = self.parse_fragment(markup)
        first = next((n for n in nodes if isinstance(n, Tag)), None)
        for index, node in enumerate(nodes):
            if at_start:
                parent.insert(index, node)
            else:
                parent.append(node)
        return first

    def remove(self, tag: Optional[Tag]) -> None:
        if tag is None:
            return
        if self.focused is not None and (
            self.focused is tag or any(parent is tag for parent in self.focused.parents)
        ):
            self.focused = None
        tag.extract()

    # ------------------------------------------------------------------
    # Classes and attributes
    # ------------------------------------------------------------------

    @staticmethod
    def classes(tag: Tag) -> List[str]:
        value = tag.get("class") or []
        if isinstance(value, str):
            value = value.split()
        return list(value)

    def has_class(self, tag: Optional[Tag], css_class: str) -> bool:
        return tag is not None and css_class in self.classes(tag)

    def add_class(self, tag: Tag, css_class: str) -> None:
        classes = self.classes(tag)
        if css_class not in classes:
            classes.append(css_class)
        tag["class"] = classes

    def remove_class(self, tag: Tag, css_class: str) -> None:
        classes = [c for c in self.classes(tag) if c != css_class]
        if classes:
            tag["class"] = classes
        elif tag.has_attr("class"):
            del tag["class"]

    def toggle_class(self, tag: Tag, css_class: str, state: bool) -> None:
        if state:
            self.add_class(tag, css_class)
        else:
            self.remove_class(tag, css_class)

    # ------------------------------------------------------------------
    # Focus and forms
    # ------------------------------------------------------------------

    def focus(self, tag: Optional[Tag]) -> None:
        self.focused = tag

    @staticmethod
    def is_disabled(tag: Tag) -> bool:
        return tag.has_attr("disabled")

    def first_focusable(self, root: Tag) -> Optional[Tag]:
        for tag in root.select(FOCUSABLE):
            if not self.is_disabled(tag):
                return tag
        return None

    @staticmethod
    def field_value(tag: Tag) -> str:
        if tag.name == "textarea":
            return tag.get_text()
        if tag.name == "select":
            option = tag.select_one("option[selected]") or tag.select_one("option")
            if option is None:
                return ""
            return option.get("value", option.get_text())
        return tag.get("value", "")

    def set_value(self, tag: Tag, value: str) -> None:
        if tag.name == "textarea":
            tag.string = value
        elif tag.name == "select":
            for option in tag.select("option"):
                if option.get("value", option.get_text()) == value:
                    option["selected"] = "selected"
                elif option.has_attr("selected"):
                    del option["selected"]
        else:
            tag["value"] = value

    def serialize_form(self, form: Tag) -> Dict[str, Any]:
        """
        Collect successful controls of a form.

        Disabled controls and unchecked checkboxes/radios are skipped;
        repeated names become lists.
        """
        data: Dict[str, Any] = {}
        for tag in form.select("input[name], select[name], textarea[name]"):
            if self.is_disabled(tag):
                continue
            input_type = (tag.get("type") or "").lower()
            if input_type in ("submit", "button", "reset", "file"):
                continue
            if input_type in ("checkbox", "radio") and not tag.has_attr("checked"):
                continue
            name = tag["name"]
            value = self.field_value(tag) if input_type not in ("checkbox", "radio") else tag.get("value", "on")
            if name in data:
                existing = data[name]
                data[name] = existing + [value] if isinstance(existing, list) else [existing, value]
            else:
                data[name] = value
        return data

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(
        self,
        event_type: str,
        selector: Optional[str],
        handler: Callable[[DomEvent, Tag], Any],
        namespace: Optional[str] = None,
    ) -> int:
        """
        Register a delegated listener.

        Args:
            event_type: "click", "keydown", "submit", "input", ...
            selector: CSS selector the bubbling node must match (None = document)
            handler: handler(event, matched_node); may be a coroutine function
            namespace: Group name for off()

        Returns:
            Listener id
        """
        listener = _Listener(next(self._ids), event_type, selector, handler, namespace)
        self._listeners.append(listener)
        return listener.id

    def off(self, namespace: Optional[str] = None, listener_id: Optional[int] = None) -> int:
        """Remove listeners by namespace or id. Returns the number removed."""
        before = len(self._listeners)
        self._listeners = [
            listener for listener in self._listeners
            if not (
                (namespace is not None and listener.namespace == namespace)
                or (listener_id is not None and listener.id == listener_id)
            )
        ]
        return before - len(self._listeners)

    def listener_count(self, namespace: Optional[str] = None) -> int:
        if namespace is None:
            return len(self._listeners)
        return sum(1 for listener in self._listeners if listener.namespace == namespace)

    def dispatch(self, event: DomEvent) -> List[asyncio.Task]:
        """
        Deliver an event with bubbling.

        Returns:
            Tasks created for coroutine handlers
        """
        tasks: List[asyncio.Task] = []
        path: List[Tag] = []
        node = event.target
        while isinstance(node, Tag) and node is not self.soup:
            path.append(node)
            node = node.parent

        listeners = [l for l in self._listeners if l.event_type == event.type]
        for node in path:
            for listener in listeners:
                if listener.selector is None or not node.css.match(listener.selector):
                    continue
                self._invoke(listener, event, node, tasks)
            if event.propagation_stopped:
                return tasks

        for listener in listeners:
            if listener.selector is None:
                self._invoke(listener, event, event.target, tasks)
        return tasks

    def _invoke(self, listener: _Listener, event: DomEvent, node: Tag, tasks: List[asyncio.Task]) -> None:
        # A listener removed by an earlier handler of the same event must not run
        if listener not in self._listeners:
            return
        result = listener.handler(event, node)
        if inspect.isawaitable(result):
            tasks.append(asyncio.ensure_future(result))

    # Convenience wrappers

    def click(self, target: Tag) -> List[asyncio.Task]:
        return self.dispatch(DomEvent("click", target))

    def keydown(self, key: str, target: Optional[Tag] = None) -> List[asyncio.Task]:
        return self.dispatch(DomEvent("keydown", target or self.focused or self.body, key=key))

    def submit(self, form: Tag) -> List[asyncio.Task]:
        return self.dispatch(DomEvent("submit", form))

    def input(self, target: Tag, value: str) -> List[asyncio.Task]:
        """Type a value into a field and fire an input event."""
        self.set_value(target, value)
        return self.dispatch(DomEvent("input", target))

    def __str__(self) -> str:
        return str(self.soup)
