"""
Service layer for polymorphic fields.

Selection control, menu building, name processing and the shared
dispatch/flag helpers.
"""

from .selection_controller import PolymorphicSelectionController
from .menu_builder import MenuBuilderService, MenuBuildContext, MenuLayout
from .enum_dispatch_service import EnumDispatchService
from .flag_context_manager import FlagContextManager, ViewFlag
from .name_processing import split_words, nicify_name, common_affixes, strip_affixes

__all__ = [
    "PolymorphicSelectionController",
    "MenuBuilderService",
    "MenuBuildContext",
    "MenuLayout",
    "EnumDispatchService",
    "FlagContextManager",
    "ViewFlag",
    "split_words",
    "nicify_name",
    "common_affixes",
    "strip_affixes",
]
