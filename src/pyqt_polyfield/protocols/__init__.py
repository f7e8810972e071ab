"""
Protocol definitions and adapters.

ABC-based contracts between the selection controller and its host
(binding, view, menu, render strategy), plus the sub-field editor
contracts and their Qt adapters.
"""

from .widget_protocols import (
    ValueGettable,
    ValueSettable,
    RangeConfigurable,
    EnumSelectable,
    ChangeSignalEmitter,
)
from .widget_adapters import (
    LineEditAdapter,
    StringListEditAdapter,
    SpinBoxAdapter,
    DoubleSpinBoxAdapter,
    ComboBoxAdapter,
    CheckBoxAdapter,
)
from .field_binding import FieldBinding
from .field_view import FieldView
from .menu_widget import MenuWidget, MenuItem, MenuSeparator, MenuEntry, SelectionCommand
from .render_strategy import (
    VariantRenderStrategy,
    NullRenderStrategy,
    register_render_strategy,
    get_render_strategy,
    clear_render_strategies,
)
from .form_config import PolyFieldConfig, set_polyfield_config, get_polyfield_config

__all__ = [
    "ValueGettable",
    "ValueSettable",
    "RangeConfigurable",
    "EnumSelectable",
    "ChangeSignalEmitter",
    "LineEditAdapter",
    "StringListEditAdapter",
    "SpinBoxAdapter",
    "DoubleSpinBoxAdapter",
    "ComboBoxAdapter",
    "CheckBoxAdapter",
    "FieldBinding",
    "FieldView",
    "MenuWidget",
    "MenuItem",
    "MenuSeparator",
    "MenuEntry",
    "SelectionCommand",
    "VariantRenderStrategy",
    "NullRenderStrategy",
    "register_render_strategy",
    "get_render_strategy",
    "clear_render_strategies",
    "PolyFieldConfig",
    "set_polyfield_config",
    "get_polyfield_config",
]
