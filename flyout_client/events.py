"""
Typed panel events.

The panel manager publishes lifecycle and data events; Table Sync and host
code subscribe to them. Handlers run synchronously in subscription order.
A failing handler is logged and does not stop delivery to the others.

Exports:
    PanelEvent: Base event
    PanelOpened, PanelClosed, TabChanged, ItemSaved, ItemDeleted: Events
    EventBus: Publish/subscribe bus with bounded history
"""

from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, List, Optional, Type, TypeVar, Union

from util_logger import LoggerFactory, ComponentType


@dataclass(frozen=True)
class PanelEvent:
    panel_id: str


@dataclass(frozen=True)
class PanelOpened(PanelEvent):
    pass


@dataclass(frozen=True)
class PanelClosed(PanelEvent):
    pass


@dataclass(frozen=True)
class TabChanged(PanelEvent):
    tab_id: str


@dataclass(frozen=True)
class ItemSaved(PanelEvent):
    item_id: Union[int, str]
    row_markup: Optional[str] = None
    message: str = ""


@dataclass(frozen=True)
class ItemDeleted(PanelEvent):
    item_id: Union[int, str]


E = TypeVar("E", bound=PanelEvent)
Handler = Callable[[Any], None]


class EventBus:
    """
    Publish/subscribe bus keyed by event class.

    Subscribing to a base class (e.g. PanelEvent) receives every subclass.
    """

    def __init__(self, history_size: int = 100):
        self._subscribers: Dict[Type[PanelEvent], List[Handler]] = {}
        self.history: Deque[PanelEvent] = deque(maxlen=history_size)
        self.logger = LoggerFactory.create_logger(ComponentType.CLIENT, "EventBus")

    def subscribe(self, event_type: Type[E], handler: Callable[[E], None]) -> Callable[[], None]:
        """
        Subscribe handler to event_type.

        Returns:
            Callable that removes the subscription (idempotent)
        """
        self._subscribers.setdefault(event_type, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, event: PanelEvent) -> None:
        self.history.append(event)
        handlers: List[Handler] = []
        for event_type, subscribed in self._subscribers.items():
            if isinstance(event, event_type):
                handlers.extend(subscribed)

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                self.logger.exception(
                    f"Event handler {getattr(handler, '__qualname__', handler)!r} failed "
                    f"for {type(event).__name__}: {e}",
                    extra={"custom_dimensions": {"panel_id": event.panel_id}},
                )

    def events_of(self, event_type: Type[E]) -> List[E]:
        """Published events of the given type, oldest first."""
        return [event for event in self.history if isinstance(event, event_type)]

