"""
Field view contract.

The low-level primitives a polymorphic field is drawn with. The selection
controller decides what is shown; a view only realizes it with its toolkit.
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from .menu_widget import MenuEntry
from .render_strategy import VariantRenderStrategy


class FieldView(ABC):
    """ABC for the drawing surface of one polymorphic field."""

    @abstractmethod
    def show_label(self, label: str) -> None:
        """Show a plain label in the label slot (no expand affordance)."""
        pass

    @abstractmethod
    def show_foldout(self, label: str, expanded: bool) -> None:
        """Show a foldout bound to the field's expand flag in the label slot."""
        pass

    @abstractmethod
    def show_dropdown(self, text: str) -> None:
        """Show the selection dropdown with the current display name."""
        pass

    @abstractmethod
    def hide_selector(self) -> None:
        """Hide the label slot and dropdown (non-polymorphic fields)."""
        pass

    @abstractmethod
    def show_content(self, strategy: VariantRenderStrategy, instance: Any, indent_level: int) -> None:
        """
        Draw an instance's sub-fields below the selector row.

        Args:
            strategy: Strategy that draws the instance
            instance: The bound instance
            indent_level: Number of indentation steps to apply
        """
        pass

    @abstractmethod
    def hide_content(self) -> None:
        pass

    @abstractmethod
    def show_menu(self, entries: Sequence[MenuEntry]) -> None:
        """Pop up the selection menu."""
        pass

    @abstractmethod
    def show_notice(self, message: str) -> None:
        """Show a transient, non-blocking notice."""
        pass
