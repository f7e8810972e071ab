"""
Variant menu construction.

Lists variants flat while the registry is small and groups them under
first-letter categories once it grows past the configured limit. Grouping
only shortens the menu; every variant still appears exactly once.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple
import logging

from pyqt_polyfield.forms.variant_registry import VariantEntry
from pyqt_polyfield.protocols.menu_widget import MenuItem, SelectionCommand
from .enum_dispatch_service import EnumDispatchService

logger = logging.getLogger(__name__)


class MenuLayout(Enum):
    FLAT = "flat"
    CATEGORIZED = "categorized"


@dataclass(frozen=True)
class MenuBuildContext:
    """Input of one menu build.

    Attributes:
        field_id: Field the produced commands address
        labeled_variants: (entry, display label) pairs in registry order
        current_type: Runtime type of the bound instance, None when unbound
        flat_limit: Largest count listed without categories
        category_separator: Separator placed between category and label
    """
    field_id: str
    labeled_variants: Tuple[Tuple[VariantEntry, str], ...]
    current_type: Optional[type]
    flat_limit: int = 10
    category_separator: str = "/"


class MenuBuilderService(EnumDispatchService[MenuLayout]):
    """Builds the variant entries of a selection menu."""

    def __init__(self):
        super().__init__()
        self._register_handlers({
            MenuLayout.FLAT: self._build_flat,
            MenuLayout.CATEGORIZED: self._build_categorized,
        })

    def _determine_strategy(self, context: MenuBuildContext) -> MenuLayout:
        if len(context.labeled_variants) <= context.flat_limit:
            return MenuLayout.FLAT
        return MenuLayout.CATEGORIZED

    def build_variant_items(self, context: MenuBuildContext) -> List[MenuItem]:
        return self.dispatch(context)

    def _build_flat(self, context: MenuBuildContext) -> List[MenuItem]:
        return [self._item(context, entry, label) for entry, label in context.labeled_variants]

    def _build_categorized(self, context: MenuBuildContext) -> List[MenuItem]:
        items = []
        for entry, label in context.labeled_variants:
            category = label[:1]
            items.append(self._item(context, entry, f"{category}{context.category_separator}{label}"))
        return items

    @staticmethod
    def _item(context: MenuBuildContext, entry: VariantEntry, label_path: str) -> MenuItem:
        return MenuItem(
            label_path=label_path,
            checked=context.current_type is entry.variant_type,
            command=SelectionCommand(context.field_id, entry.identifier),
        )

