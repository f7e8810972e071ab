"""
Editor adapters that wrap Qt widgets to implement the editor ABCs.

Normalizes Qt's inconsistent APIs:
- QLineEdit.text() vs QSpinBox.value() vs QComboBox.currentData()
- textChanged vs valueChanged vs currentIndexChanged

Every adapter registers itself through EditorMeta for the value types it
edits, which is how DataclassRenderStrategy picks an editor per sub-field.
"""

from typing import Any, Callable, Dict
from enum import Enum

from PyQt6.QtWidgets import QLineEdit, QSpinBox, QDoubleSpinBox, QComboBox, QCheckBox

from pyqt_polyfield.forms.editor_registry import (
    EditorMeta, ENUM_VALUE_TYPE, STRING_LIST_VALUE_TYPE
)
from .widget_protocols import (
    ValueGettable, ValueSettable, RangeConfigurable, EnumSelectable, ChangeSignalEmitter
)


class _SignalSlots:
    """Keeps the wrapper slot created for each callback so it can be disconnected."""

    def __init__(self):
        self._slots: Dict[Callable, Callable] = {}

    def wrap(self, callback: Callable[[Any], None], getter: Callable[[], Any]) -> Callable:
        slot = self._slots[callback] = lambda *_: callback(getter())
        return slot

    def pop(self, callback: Callable[[Any], None]):
        return self._slots.pop(callback, None)


class LineEditAdapter(QLineEdit, ValueGettable, ValueSettable, ChangeSignalEmitter,
                      metaclass=EditorMeta):
    """
    Adapter for QLineEdit editing str fields.

    An empty line reads back as "" so a str field never turns into None.
    """

    _editor_id = "line_edit"
    _value_types = (str,)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._slots = _SignalSlots()

    def get_value(self) -> Any:
        return self.text()

    def set_value(self, value: Any) -> None:
        self.setText("" if value is None else str(value))

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        self.textEdited.connect(self._slots.wrap(callback, self.get_value))

    def disconnect_change_signal(self, callback: Callable[[Any], None]) -> None:
        slot = self._slots.pop(callback)
        if slot is not None:
            self.textEdited.disconnect(slot)


class StringListEditAdapter(LineEditAdapter):
    """
    Adapter editing list[str] fields as comma separated text.

    'Ada, Grace' <-> ['Ada', 'Grace']; blank items are dropped.
    """

    _editor_id = "string_list"
    _value_types = (STRING_LIST_VALUE_TYPE,)

    def get_value(self) -> Any:
        return [part.strip() for part in self.text().split(",") if part.strip()]

    def set_value(self, value: Any) -> None:
        self.setText(", ".join(str(item) for item in (value or ())))


class SpinBoxAdapter(QSpinBox, ValueGettable, ValueSettable, RangeConfigurable,
                     ChangeSignalEmitter, metaclass=EditorMeta):
    """Adapter for QSpinBox editing int fields."""

    _editor_id = "spin_box"
    _value_types = (int,)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._slots = _SignalSlots()
        self.setRange(-2147483648, 2147483647)  # Default int range

    def get_value(self) -> Any:
        return self.value()

    def set_value(self, value: Any) -> None:
        self.setValue(0 if value is None else int(value))

    def configure_range(self, minimum: float, maximum: float) -> None:
        self.setRange(int(minimum), int(maximum))

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        self.valueChanged.connect(self._slots.wrap(callback, self.get_value))

    def disconnect_change_signal(self, callback: Callable[[Any], None]) -> None:
        slot = self._slots.pop(callback)
        if slot is not None:
            self.valueChanged.disconnect(slot)


class DoubleSpinBoxAdapter(QDoubleSpinBox, ValueGettable, ValueSettable, RangeConfigurable,
                           ChangeSignalEmitter, metaclass=EditorMeta):
    """Adapter for QDoubleSpinBox editing float fields."""

    _editor_id = "double_spin_box"
    _value_types = (float,)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._slots = _SignalSlots()
        self.setRange(-1e308, 1e308)  # Default float range
        self.setDecimals(6)

    def get_value(self) -> Any:
        return self.value()

    def set_value(self, value: Any) -> None:
        self.setValue(0.0 if value is None else float(value))

    def configure_range(self, minimum: float, maximum: float) -> None:
        self.setRange(minimum, maximum)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        self.valueChanged.connect(self._slots.wrap(callback, self.get_value))

    def disconnect_change_signal(self, callback: Callable[[Any], None]) -> None:
        slot = self._slots.pop(callback)
        if slot is not None:
            self.valueChanged.disconnect(slot)


class ComboBoxAdapter(QComboBox, ValueGettable, ValueSettable, EnumSelectable,
                      ChangeSignalEmitter, metaclass=EditorMeta):
    """
    Adapter for QComboBox editing Enum fields.

    Stores enum members in itemData, not just display text.
    """

    _editor_id = "combo_box"
    _value_types = (ENUM_VALUE_TYPE,)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._slots = _SignalSlots()

    def get_value(self) -> Any:
        if self.currentIndex() < 0:
            return None
        return self.itemData(self.currentIndex())

    def set_value(self, value: Any) -> None:
        for i in range(self.count()):
            if self.itemData(i) == value:
                self.setCurrentIndex(i)
                return
        # Value not found - clear selection
        self.setCurrentIndex(-1)

    def set_enum_options(self, enum_type: type) -> None:
        if not isinstance(enum_type, type) or not issubclass(enum_type, Enum):
            raise TypeError(f"{enum_type} is not an Enum type")

        self.clear()
        for enum_value in enum_type:
            self.addItem(enum_value.name.title(), enum_value)

    def get_selected_enum(self) -> Any:
        return self.get_value()

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        self.currentIndexChanged.connect(self._slots.wrap(callback, self.get_value))

    def disconnect_change_signal(self, callback: Callable[[Any], None]) -> None:
        slot = self._slots.pop(callback)
        if slot is not None:
            self.currentIndexChanged.disconnect(slot)


class CheckBoxAdapter(QCheckBox, ValueGettable, ValueSettable, ChangeSignalEmitter,
                      metaclass=EditorMeta):
    """Adapter for QCheckBox editing bool fields; None reads as False."""

    _editor_id = "check_box"
    _value_types = (bool,)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._slots = _SignalSlots()

    def get_value(self) -> Any:
        return self.isChecked()

    def set_value(self, value: Any) -> None:
        self.setChecked(bool(value) if value is not None else False)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        self.toggled.connect(self._slots.wrap(callback, self.get_value))

    def disconnect_change_signal(self, callback: Callable[[Any], None]) -> None:
        slot = self._slots.pop(callback)
        if slot is not None:
            self.toggled.disconnect(slot)
