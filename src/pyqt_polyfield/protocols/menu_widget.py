"""Menu entries and the menu widget protocol.

Menu entries carry command objects instead of callbacks, so a selection can
be dispatched, replayed or inspected without a live reference to the field.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Sequence, Union


@dataclass(frozen=True)
class SelectionCommand:
    """Request to bind a field to a variant.

    Attributes:
        field_id: Identifier of the target field binding
        variant_id: VariantEntry.identifier of the chosen variant, None to unbind
    """
    field_id: str
    variant_id: Optional[str]

    @property
    def clears(self) -> bool:
        return self.variant_id is None


@dataclass(frozen=True)
class MenuItem:
    """One selectable menu entry.

    label_path may contain the category separator, which the menu widget
    renders as nested submenus.
    """
    label_path: str
    checked: bool
    command: SelectionCommand


@dataclass(frozen=True)
class MenuSeparator:
    """Divider between the None entry and the variant entries."""


MenuEntry = Union[MenuItem, MenuSeparator]


class MenuWidget(Protocol):
    """Protocol for menus that display entries on demand."""

    def show_entries(
        self,
        entries: Sequence[MenuEntry],
        on_select: Callable[[SelectionCommand], None],
        anchor: Optional[Any] = None,
    ) -> None:
        """Display entries; call on_select with the command of the chosen entry."""
        ...
