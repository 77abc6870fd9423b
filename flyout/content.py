"""
Panel content entries.

A content entry is one of:
    - literal markup (str)
    - a Renderable (any object with a render() -> str method)
    - a zero-argument producer returning markup

Exports:
    Renderable: Protocol for nested renderable content
    ContentEntry: Type alias for accepted entries
    is_blank: True for entries that are dropped when added
    render_entry: Produce markup for one entry
"""

from typing import Callable, Protocol, Union, Any, runtime_checkable

from exceptions import ContractViolationError


@runtime_checkable
class Renderable(Protocol):
    """Anything that can render itself to markup."""

    def render(self) -> str:
        ...


ContentEntry = Union[str, Renderable, Callable[[], str]]


def is_blank(entry: Any) -> bool:
    """None and empty strings are ignored by the panel content builders."""
    return entry is None or (isinstance(entry, str) and entry == "")


def render_entry(entry: ContentEntry) -> str:
    """
    Render a single content entry to markup.

    Raises:
        ContractViolationError: entry is not a string, Renderable or callable,
            or a producer returned something other than a string
    """
    if isinstance(entry, str):
        return entry
    if isinstance(entry, Renderable):
        return str(entry.render())
    if callable(entry):
        produced = entry()
        if produced is None:
            return ""
        if not isinstance(produced, str):
            raise ContractViolationError(
                f"Content producer {getattr(entry, '__name__', entry)!r} "
                f"returned {type(produced).__name__}, expected str"
            )
        return produced
    raise ContractViolationError(
        f"Unsupported content entry type: {type(entry).__name__}"
    )
