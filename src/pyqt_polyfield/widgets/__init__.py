"""
PyQt6 widgets for polymorphic fields.
"""

from .polymorphic_field_widget import PolymorphicFieldWidget, create_polymorphic_field
from .qt_menu_widget import QtMenuWidget
from .dataclass_render_strategy import DataclassRenderStrategy

__all__ = [
    "PolymorphicFieldWidget",
    "create_polymorphic_field",
    "QtMenuWidget",
    "DataclassRenderStrategy",
]
