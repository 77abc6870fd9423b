"""
Table sync.

Keeps a row-oriented list display in step with saves and deletes made
through panels:

    saved   -> row replaced in place (or inserted first), highlighted briefly
    deleted -> row marked, faded, removed; empty state row when nothing is left

Exports:
    TableSync: ItemSaved / ItemDeleted subscriber
    EMPTY_ROW_CLASS: Class of the synthetic empty-state row
"""

from typing import Any, Callable, List, Optional
import asyncio
import html as html_module

from bs4 import Tag

from config.client_config import ClientConfig
from flyout_client.document import ClientDocument
from flyout_client.events import EventBus, ItemDeleted, ItemSaved
from util_logger import LoggerFactory, ComponentType

EMPTY_ROW_CLASS = "no-items"
HIGHLIGHT_CLASS = "flyout-row-highlight"
DELETING_CLASS = "flyout-row-deleting"
FADING_CLASS = "flyout-row-fading"


class TableSync:
    """
    Applies ItemSaved / ItemDeleted events to the list table.

    Usage:
        sync = TableSync(document, bus, config)
        ...
        sync.detach()
    """

    def __init__(self, document: ClientDocument, bus: EventBus, config: Optional[ClientConfig] = None):
        self.document = document
        self.config = config or ClientConfig()
        self.logger = LoggerFactory.create_logger(ComponentType.SYNC, "TableSync")
        self._unsubscribe: List[Callable[[], None]] = [
            bus.subscribe(ItemSaved, self.on_saved),
            bus.subscribe(ItemDeleted, self.on_deleted),
        ]

    def detach(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []

    # ========================================================================
    # LOOKUP
    # ========================================================================

    @property
    def table(self) -> Optional[Tag]:
        return self.document.select_one(self.config.table_selector)

    def _tbody(self) -> Optional[Tag]:
        table = self.table
        if table is None:
            return None
        return self.document.select_one("tbody", table) or table

    def data_rows(self) -> List[Tag]:
        """Rows that carry an item, including ones still fading out."""
        tbody = self._tbody()
        if tbody is None:
            return []
        return [
            row for row in tbody.find_all("tr", recursive=False)
            if not self.document.has_class(row, EMPTY_ROW_CLASS)
        ]

    def find_row(self, item_id: Any) -> Optional[Tag]:
        tbody = self._tbody()
        if tbody is None:
            return None
        wanted = str(item_id)
        for row in tbody.find_all("tr", recursive=False):
            if row.get("data-id") == wanted:
                return row
        return None

    def column_count(self) -> int:
        table = self.table
        if table is None:
            return 1
        headers = self.document.select("thead th", table)
        return max(len(headers), 1)

    def _later(self, delay: float, callback: Callable[..., None], *args: Any) -> None:
        asyncio.get_running_loop().call_later(delay, callback, *args)

    # ========================================================================
    # SAVED
    # ========================================================================

    def on_saved(self, event: ItemSaved) -> None:
        if not event.row_markup:
            return
        tbody = self._tbody()
        if tbody is None:
            self.logger.debug(f"No table matches '{self.config.table_selector}', skipping row sync")
            return

        existing = self.find_row(event.item_id)
        if existing is not None:
            row = self.document.replace_with_markup(existing, event.row_markup)
        else:
            for empty in self.document.select(f"tr.{EMPTY_ROW_CLASS}", tbody):
                self.document.remove(empty)
            row = self.document.prepend_markup(event.row_markup, tbody)

        if row is None:
            self.logger.warning(f"Row markup for item {event.item_id} produced no element")
            return
        self.document.add_class(row, HIGHLIGHT_CLASS)
        self._later(self.config.highlight_duration, self.document.remove_class, row, HIGHLIGHT_CLASS)
        self.logger.debug(f"Row {event.item_id} {'replaced' if existing is not None else 'inserted'}")

    # ========================================================================
    # DELETED
    # ========================================================================

    def on_deleted(self, event: ItemDeleted) -> None:
        row = self.find_row(event.item_id)
        if row is None:
            self.logger.debug(f"No row for deleted item {event.item_id}")
            return
        self.document.add_class(row, DELETING_CLASS)
        self._later(self.config.delete_delay, self._fade, row)

    def _fade(self, row: Tag) -> None:
        if not self.document.contains(row):
            return
        self.document.add_class(row, FADING_CLASS)
        self._later(self.config.fade_duration, self._drop, row)

    def _drop(self, row: Tag) -> None:
        self.document.remove(row)
        if not self.data_rows():
            self.ensure_empty_row()

    def ensure_empty_row(self) -> Optional[Tag]:
        """Insert the single empty-state row unless one is present."""
        tbody = self._tbody()
        if tbody is None:
            return None
        existing = self.document.select_one(f"tr.{EMPTY_ROW_CLASS}", tbody)
        if existing is not None:
            return existing
        message = html_module.escape(self.config.messages.no_items)
        return self.document.append_markup(
            f'<tr class="{EMPTY_ROW_CLASS}"><td colspan="{self.column_count()}">{message}</td></tr>',
            tbody,
        )
