"""
Trigger commands.

A trigger element declares which panel to open and what to do:

    <a data-flyout-trigger="product-editor" data-flyout-action="delete" data-id="7">

`data-flyout-action` defaults to load; every other `data-*` attribute is
payload (hyphens become underscores), and the `data-id` of an enclosing
table row is added as `row_id`.

Exports:
    TriggerCommand: Typed routing of a trigger activation
    TRIGGER_SELECTOR: Selector matching trigger elements
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from bs4 import Tag

from core.models.enums import PanelAction
from exceptions import ContractViolationError

TRIGGER_SELECTOR = "[data-flyout-trigger]"
_TRIGGER_ATTRS = ("data-flyout-trigger", "data-flyout-action")


@dataclass(frozen=True)
class TriggerCommand:
    panel_id: str
    action: PanelAction = PanelAction.LOAD
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_element(cls, element: Tag) -> "TriggerCommand":
        """
        Read a command from a trigger element.

        Raises:
            ContractViolationError: element is not a trigger
            ValueError: unknown data-flyout-action
        """
        panel_id = element.get("data-flyout-trigger")
        if not panel_id:
            raise ContractViolationError(f"<{element.name}> has no data-flyout-trigger")

        action = PanelAction((element.get("data-flyout-action") or PanelAction.LOAD.value).strip().lower())

        payload: Dict[str, Any] = {}
        for name, value in element.attrs.items():
            if not name.startswith("data-") or name in _TRIGGER_ATTRS:
                continue
            payload[name[len("data-"):].replace("-", "_")] = value

        row = element.find_parent("tr", attrs={"data-id": True})
        if row is not None:
            payload["row_id"] = row["data-id"]

        return cls(panel_id=panel_id, action=action, payload=payload)

    @property
    def item_id(self) -> Any:
        """Id carried by the trigger (`id`, else the enclosing row's id)."""
        return self.payload.get("id") or self.payload.get("row_id")
