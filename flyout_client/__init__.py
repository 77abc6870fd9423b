"""
Headless client runtime for flyout panels.

Operates on a ClientDocument (BeautifulSoup tree) the way the browser
runtime operates on the page: triggers open panels through the remote
action endpoint, the manager drives the lifecycle, and TableSync keeps the
list table in step with saves and deletes.

Usage:
    document = ClientDocument(page_html)
    manager, sync = start_client(document, transport, bootstrap)
    await manager.open("product-editor", {"id": "7"})

Exports:
    start_client: Wire a manager and table sync on a shared event bus
"""

from typing import Optional, Tuple

from config.client_config import ClientConfig
from core.models.bootstrap import ClientBootstrap
from flyout_client.commands import TriggerCommand
from flyout_client.document import ClientDocument, DomEvent
from flyout_client.events import (
    EventBus,
    ItemDeleted,
    ItemSaved,
    PanelClosed,
    PanelEvent,
    PanelOpened,
    TabChanged,
)
from flyout_client.manager import ClientInstance, ConfirmHook, PanelManager
from flyout_client.table_sync import TableSync
from flyout_client.transport import HttpxTransport, Transport


def start_client(
    document: ClientDocument,
    transport: Transport,
    bootstrap: ClientBootstrap,
    config: Optional[ClientConfig] = None,
    confirm: Optional[ConfirmHook] = None,
) -> Tuple[PanelManager, TableSync]:
    """Create a started PanelManager and a TableSync sharing one EventBus."""
    config = config or ClientConfig()
    bus = EventBus()
    manager = PanelManager(document, transport, bootstrap, config=config, bus=bus, confirm=confirm)
    sync = TableSync(document, bus, config)
    return manager.start(), sync


__all__ = [
    'ClientDocument',
    'ClientInstance',
    'DomEvent',
    'EventBus',
    'HttpxTransport',
    'ItemDeleted',
    'ItemSaved',
    'PanelClosed',
    'PanelEvent',
    'PanelManager',
    'PanelOpened',
    'TabChanged',
    'TableSync',
    'Transport',
    'TriggerCommand',
    'start_client',
]
