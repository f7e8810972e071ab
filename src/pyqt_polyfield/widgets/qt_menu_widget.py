"""QMenu realization of selection menu entries."""

from typing import Callable, Dict, Optional, Sequence
import logging

from PyQt6.QtCore import QPoint
from PyQt6.QtGui import QCursor
from PyQt6.QtWidgets import QMenu, QWidget

from pyqt_polyfield.protocols.menu_widget import MenuEntry, MenuSeparator, SelectionCommand

logger = logging.getLogger(__name__)


class QtMenuWidget:
    """
    Builds and pops up a QMenu from menu entries.

    Label paths containing the category separator become nested submenus:
    'S/Standard' is the 'Standard' action inside the 'S' submenu.

    Usage:
        menu_widget = QtMenuWidget(parent=self)
        menu_widget.show_entries(entries, on_select=self._apply, anchor=self._dropdown)
    """

    def __init__(self, parent: Optional[QWidget] = None, category_separator: str = "/"):
        self._parent = parent
        self._category_separator = category_separator
        self._menu: Optional[QMenu] = None

    @property
    def menu(self) -> Optional[QMenu]:
        """The most recently built menu; earlier ones are scheduled for deletion."""
        return self._menu

    def build_menu(
        self,
        entries: Sequence[MenuEntry],
        on_select: Callable[[SelectionCommand], None],
    ) -> QMenu:
        if self._menu is not None:
            self._menu.deleteLater()
            self._menu = None

        menu = QMenu(self._parent)
        submenus: Dict[str, QMenu] = {}

        for entry in entries:
            if isinstance(entry, MenuSeparator):
                menu.addSeparator()
                continue

            *categories, label = entry.label_path.split(self._category_separator)
            target = menu
            for depth, category in enumerate(categories):
                key = self._category_separator.join(categories[:depth + 1])
                if key not in submenus:
                    submenus[key] = target.addMenu(category)
                target = submenus[key]

            action = target.addAction(label)
            action.setCheckable(True)
            action.setChecked(entry.checked)
            action.triggered.connect(
                lambda _checked=False, command=entry.command: on_select(command)
            )

        self._menu = menu
        return menu

    def show_entries(
        self,
        entries: Sequence[MenuEntry],
        on_select: Callable[[SelectionCommand], None],
        anchor: Optional[QWidget] = None,
    ) -> None:
        menu = self.build_menu(entries, on_select)
        if anchor is not None:
            position = anchor.mapToGlobal(QPoint(0, anchor.height()))
        else:
            position = QCursor.pos()
        logger.debug(f"Showing selection menu with {len(entries)} entries")
        menu.popup(position)
