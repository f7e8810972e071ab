"""
Editor ABC contracts for sub-field widgets.

Explicit contracts every sub-field editor implements so that render
strategies read, write and observe values without duck typing on Qt's
inconsistent APIs (text() vs value() vs currentData()).
"""

from abc import ABC, abstractmethod
from typing import Any, Callable


class ValueGettable(ABC):
    """ABC for editors that can return a value."""

    @abstractmethod
    def get_value(self) -> Any:
        """
        Get the current value from the editor.

        Returns:
            The editor's current value. None if no value set.
        """
        pass


class ValueSettable(ABC):
    """ABC for editors that can accept a value."""

    @abstractmethod
    def set_value(self, value: Any) -> None:
        """
        Set the editor's value.

        Args:
            value: The value to set. None clears the editor.
        """
        pass


class RangeConfigurable(ABC):
    """ABC for numeric editors with a configurable range."""

    @abstractmethod
    def configure_range(self, minimum: float, maximum: float) -> None:
        pass


class EnumSelectable(ABC):
    """ABC for editors that select one member of an Enum."""

    @abstractmethod
    def set_enum_options(self, enum_type: type) -> None:
        """
        Configure the editor with enum options.

        Args:
            enum_type: The Enum class to populate options from
        """
        pass

    @abstractmethod
    def get_selected_enum(self) -> Any:
        pass


class ChangeSignalEmitter(ABC):
    """
    ABC for editors that report edits.

    Hides the signal name (textChanged vs valueChanged vs currentIndexChanged)
    behind a single connect/disconnect pair.
    """

    @abstractmethod
    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """
        Connect callback to the editor's change signal.

        Args:
            callback: Called with the new value after every edit.
        """
        pass

    @abstractmethod
    def disconnect_change_signal(self, callback: Callable[[Any], None]) -> None:
        pass
