"""
Qt view of a polymorphic field.

Selector row (foldout or label, then a dropdown button) above a container
holding the selected variant's sub-fields. Every decision is taken by the
PolymorphicSelectionController; the widget only realizes it.
"""

from typing import Any, Mapping, Optional, Sequence
import logging

from PyQt6.QtCore import QPoint, QRect, QSize, Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QHBoxLayout, QLabel, QPushButton, QSizePolicy, QToolButton, QToolTip, QVBoxLayout, QWidget
)

from pyqt_polyfield.forms.editor_registry import QtABCMeta
from pyqt_polyfield.forms.object_field_binding import ObjectFieldBinding
from pyqt_polyfield.protocols.field_binding import FieldBinding
from pyqt_polyfield.protocols.field_view import FieldView
from pyqt_polyfield.protocols.menu_widget import MenuEntry, SelectionCommand
from pyqt_polyfield.protocols.render_strategy import VariantRenderStrategy
from pyqt_polyfield.services.flag_context_manager import FlagContextManager
from pyqt_polyfield.services.selection_controller import PolymorphicSelectionController
from .qt_menu_widget import QtMenuWidget

logger = logging.getLogger(__name__)


class PolymorphicFieldWidget(QWidget, FieldView, metaclass=QtABCMeta):
    """
    Editor widget for one polymorphic field.

    Usage:
        controller = PolymorphicSelectionController(NameGenerator)
        binding = ObjectFieldBinding(character, "name_generator")
        widget = PolymorphicFieldWidget(controller, binding, "Name Generator", parent=self)
        widget.selection_changed.connect(self._on_generator_changed)
    """

    selection_changed = pyqtSignal(object)  # new bound value (None when cleared)

    def __init__(
        self,
        controller: PolymorphicSelectionController,
        binding: FieldBinding,
        label: str = "",
        menu_widget: Optional[QtMenuWidget] = None,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self._controller = controller
        self._binding = binding
        self._label_text = label
        self._menu_widget = menu_widget or QtMenuWidget(self, controller.config.category_separator)
        self._measured_height = 0
        self._drawn: Optional[tuple] = None  # (strategy, instance) currently in the content area

        # Flags managed by FlagContextManager
        self._syncing_view = False
        self._dispatching = False

        self._setup_ui()
        self.refresh()

    @property
    def binding(self) -> FieldBinding:
        return self._binding

    @property
    def controller(self) -> PolymorphicSelectionController:
        return self._controller

    @property
    def measured_height(self) -> int:
        return self._measured_height

    def _setup_ui(self):
        layout_config = self._controller.config.layout

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(layout_config.vertical_spacing)

        self._selector = QWidget()
        row = QHBoxLayout(self._selector)
        row.setContentsMargins(0, 0, 0, 0)
        row.setSpacing(layout_config.row_spacing)

        self._foldout = QToolButton()
        self._foldout.setCheckable(True)
        self._foldout.setAutoRaise(True)
        self._foldout.setToolButtonStyle(Qt.ToolButtonStyle.ToolButtonTextBesideIcon)
        self._foldout.setFixedWidth(layout_config.label_width)
        self._foldout.toggled.connect(self._on_foldout_toggled)
        row.addWidget(self._foldout)

        self._label = QLabel()
        self._label.setFixedWidth(layout_config.label_width)
        row.addWidget(self._label)

        self._dropdown = QPushButton()
        self._dropdown.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        self._dropdown.clicked.connect(self._on_dropdown_clicked)
        row.addWidget(self._dropdown, 1)

        layout.addWidget(self._selector)

        self._content = QWidget()
        self._content_layout = QVBoxLayout(self._content)
        self._content_layout.setContentsMargins(0, 0, 0, 0)
        self._content_layout.setSpacing(0)
        layout.addWidget(self._content)

    def refresh(self) -> None:
        """Re-measure and re-render the field from its binding."""
        with FlagContextManager.manage_flags(self, _syncing_view=True):
            self._measured_height = self._controller.measure_height(self._binding, self._label_text)
            self._controller.render(self, self._binding, self._label_text)
        self.updateGeometry()

    def sizeHint(self) -> QSize:
        hint = super().sizeHint()
        return QSize(hint.width(), max(hint.height(), self._measured_height))

    # ------------------------------------------------------------------
    # FieldView
    # ------------------------------------------------------------------

    def show_label(self, label: str) -> None:
        self._selector.show()
        self._foldout.hide()
        self._label.setText(label)
        self._label.show()

    def show_foldout(self, label: str, expanded: bool) -> None:
        self._selector.show()
        self._label.hide()
        self._foldout.setText(label)
        self._foldout.setChecked(expanded)
        self._foldout.setArrowType(Qt.ArrowType.DownArrow if expanded else Qt.ArrowType.RightArrow)
        self._foldout.show()

    def show_dropdown(self, text: str) -> None:
        self._dropdown.setText(text)

    def hide_selector(self) -> None:
        self._selector.hide()

    def show_content(self, strategy: VariantRenderStrategy, instance: Any, indent_level: int) -> None:
        drawn = self._drawn
        if drawn is None or drawn[0] is not strategy or drawn[1] is not instance:
            self._clear_content()
            area = QWidget()
            strategy.draw(area, instance)
            self._content_layout.addWidget(area)
            self._drawn = (strategy, instance)

        indent = indent_level * self._controller.config.layout.indent_width
        self._content_layout.setContentsMargins(indent, 0, 0, 0)
        self._content.show()

    def hide_content(self) -> None:
        self._content.hide()
        if self._drawn is not None and self._drawn[1] is not self._binding.get_value():
            self._clear_content()

    def show_menu(self, entries: Sequence[MenuEntry]) -> None:
        self._menu_widget.show_entries(entries, self._on_menu_command, anchor=self._dropdown)

    def show_notice(self, message: str) -> None:
        position = self._dropdown.mapToGlobal(QPoint(0, self._dropdown.height()))
        QToolTip.showText(
            position, message, self._dropdown, QRect(),
            self._controller.config.notice_timeout_ms,
        )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _clear_content(self) -> None:
        while self._content_layout.count():
            item = self._content_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self._drawn = None

    def _on_dropdown_clicked(self) -> None:
        try:
            self._controller.activate_dropdown(self, self._binding)
        except Exception as e:
            self._report_failure("open the selection menu", e)

    def _on_menu_command(self, command: SelectionCommand) -> None:
        if self._dispatching:
            logger.debug(f"Ignoring reentrant selection for '{self._binding.field_id}'")
            return

        try:
            with FlagContextManager.manage_flags(self, _dispatching=True):
                applied = self._controller.apply_selection(self._binding, command, notify=self.show_notice)
            if applied:
                self.refresh()
        except Exception as e:
            # Slots must not raise into the Qt event loop
            self._report_failure("apply the selection", e)
            return

        if applied:
            self.selection_changed.emit(self._binding.get_value())

    def _on_foldout_toggled(self, checked: bool) -> None:
        if self._syncing_view:
            return
        try:
            self._controller.toggle_expanded(self._binding, checked)
            self.refresh()
        except Exception as e:
            self._report_failure("update the field", e)

    def _report_failure(self, action: str, error: Exception) -> None:
        logger.error(f"Could not {action} for '{self._binding.field_id}': {error}", exc_info=True)
        self.show_notice(f"Could not {action}: {error}")


def create_polymorphic_field(
    owner: Any,
    field_name: str,
    label: Optional[str] = None,
    *,
    none_allowed: bool = False,
    strategies: Optional[Mapping[type, VariantRenderStrategy]] = None,
    parent: Optional[QWidget] = None,
) -> PolymorphicFieldWidget:
    """
    Build a field widget for an attribute of a host object.

    The contract is the attribute's annotated type; variants without a
    registered strategy are drawn field by field when they are dataclasses.
    """
    from pyqt_polyfield.services.name_processing import nicify_name
    from .dataclass_render_strategy import DataclassRenderStrategy

    binding = ObjectFieldBinding(owner, field_name)
    if binding.contract_type is None:
        raise TypeError(f"{type(owner).__name__}.{field_name} has no type annotation")

    controller = PolymorphicSelectionController(
        binding.contract_type,
        none_allowed=none_allowed,
        strategies=strategies,
        fallback_strategy=DataclassRenderStrategy(),
    )
    return PolymorphicFieldWidget(
        controller, binding, label if label is not None else nicify_name(field_name), parent=parent
    )
