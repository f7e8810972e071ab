"""
Render strategy drawing a dataclass variant field by field.

Each field becomes one row, top to bottom with fixed spacing:
- fields typed with a contract recurse into a nested PolymorphicFieldWidget
- nested dataclass values are drawn as a titled group with their own rows
- other fields use the editor registered for their type, read-only text otherwise;
  a field metadata "range" of (minimum, maximum) bounds numeric editors

Every edit is a transactional set on an ObjectFieldBinding of the sub-field.
"""

import dataclasses
from functools import partial
from typing import Any, Dict, List, Optional
import logging
import weakref

from PyQt6.QtWidgets import QGroupBox, QHBoxLayout, QLabel, QVBoxLayout, QWidget

from pyqt_polyfield.forms.contract_meta import is_contract
from pyqt_polyfield.forms.editor_registry import editor_id_for_annotation, get_editor_class
from pyqt_polyfield.forms.object_field_binding import ObjectFieldBinding
from pyqt_polyfield.forms.type_utils import is_enum, resolve_optional
from pyqt_polyfield.forms.variant_registry import VARIANT_REGISTRATIONS
from pyqt_polyfield.protocols.form_config import PolyFieldConfig, get_polyfield_config
from pyqt_polyfield.protocols.render_strategy import VariantRenderStrategy
from pyqt_polyfield.protocols.widget_protocols import EnumSelectable, RangeConfigurable
from pyqt_polyfield.services.name_processing import nicify_name
from pyqt_polyfield.services.selection_controller import PolymorphicSelectionController
from .polymorphic_field_widget import PolymorphicFieldWidget

logger = logging.getLogger(__name__)


class DataclassRenderStrategy(VariantRenderStrategy):
    """
    Default strategy for dataclass variants.

    A variant without (public) fields has height 0, which suppresses the
    foldout of its field.

    Example:
        @dataclass
        class SyllableNameGenerator(NameGenerator):
            syllables: int = field(default=2, metadata={"range": (1, 6)})
    """

    def __init__(self, config: Optional[PolyFieldConfig] = None):
        self._config = config
        self._controllers: Dict[type, PolymorphicSelectionController] = {}
        # Only bindings still held by a drawn row or nested field stay cached
        self._bindings: weakref.WeakValueDictionary = weakref.WeakValueDictionary()

    @property
    def config(self) -> PolyFieldConfig:
        return self._config or get_polyfield_config()

    def height(self, instance: Any) -> int:
        fields = self._fields(instance)
        if not fields:
            return 0
        spacing = self.config.layout.vertical_spacing
        return sum(self._row_height(instance, f) for f in fields) + spacing * (len(fields) - 1)

    def draw(self, position: QWidget, instance: Any) -> None:
        layout = position.layout()
        if layout is None:
            layout = QVBoxLayout(position)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(self.config.layout.vertical_spacing)

        for f in self._fields(instance):
            layout.addWidget(self._create_row(instance, f, position))

    # ------------------------------------------------------------------

    @staticmethod
    def _fields(instance: Any) -> List[dataclasses.Field]:
        if instance is None or isinstance(instance, type) or not dataclasses.is_dataclass(instance):
            return []
        return [f for f in dataclasses.fields(instance) if not f.name.startswith('_')]

    def _binding_for(self, instance: Any, field_name: str) -> ObjectFieldBinding:
        # Cached so the expand flag of drawn nested fields survives re-measuring
        key = (id(instance), field_name)
        binding = self._bindings.get(key)
        if binding is None or binding.owner is not instance:
            binding = ObjectFieldBinding(instance, field_name)
            self._bindings[key] = binding
        return binding

    def _controller_for(self, contract: type) -> PolymorphicSelectionController:
        controller = self._controllers.get(contract)
        if controller is None:
            controller = PolymorphicSelectionController(
                contract, fallback_strategy=self, config=self._config
            )
            self._controllers[contract] = controller
        return controller

    @staticmethod
    def _is_contract_field(binding: ObjectFieldBinding) -> bool:
        contract = binding.contract_type
        if not binding.supports_polymorphic:
            return False
        return is_contract(contract) or contract in VARIANT_REGISTRATIONS

    def _row_height(self, instance: Any, f: dataclasses.Field) -> int:
        layout = self.config.layout
        binding = self._binding_for(instance, f.name)

        if self._is_contract_field(binding):
            return self._controller_for(binding.contract_type).measure_height(binding)

        value = binding.get_value()
        nested = self.height(value)
        if nested > 0:
            return layout.line_height + layout.vertical_spacing + nested
        return layout.line_height

    def _create_row(self, instance: Any, f: dataclasses.Field, parent: QWidget) -> QWidget:
        binding = self._binding_for(instance, f.name)
        label = nicify_name(f.name)

        if self._is_contract_field(binding):
            controller = self._controller_for(binding.contract_type)
            return PolymorphicFieldWidget(controller, binding, label, parent=parent)

        value = binding.get_value()
        if self._fields(value):
            group = QGroupBox(label, parent)
            self.draw(group, value)
            return group

        row = QWidget(parent)
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(0, 0, 0, 0)
        row_layout.setSpacing(self.config.layout.row_spacing)

        name_label = QLabel(label)
        name_label.setFixedWidth(self.config.layout.label_width)
        row_layout.addWidget(name_label)
        row_layout.addWidget(self._create_editor(binding, f), 1)
        return row

    def _create_editor(self, binding: ObjectFieldBinding, f: dataclasses.Field) -> QWidget:
        annotation = binding.contract_type or f.type
        editor_id = editor_id_for_annotation(annotation)
        if editor_id is None:
            logger.debug(f"No editor for {annotation!r}; showing '{binding.field_id}' read-only")
            return QLabel(repr(binding.get_value()))

        editor = get_editor_class(editor_id)()
        resolved = resolve_optional(annotation)
        if isinstance(editor, EnumSelectable) and is_enum(resolved):
            editor.set_enum_options(resolved)
        value_range = f.metadata.get("range")
        if value_range is not None and isinstance(editor, RangeConfigurable):
            editor.configure_range(*value_range)
        editor.set_value(binding.get_value())
        editor.connect_change_signal(partial(self._commit_edit, binding))
        return editor

    @staticmethod
    def _commit_edit(binding: ObjectFieldBinding, value: Any) -> None:
        try:
            with binding.transaction():
                binding.assign(value)
        except Exception as exc:
            # Slots must not raise into the Qt event loop
            logger.error(f"Failed to store edit of '{binding.field_id}': {exc}")
