"""
Variant catalog and host-side field storage.

Contract metaclass, per-contract variant registries, the editor registry
and the reference ObjectFieldBinding.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .contract_meta import ContractMeta, is_contract
    from .variant_registry import (
        VariantEntry,
        VariantRegistry,
        register_variant,
        register_variant_source,
        get_variant_registry,
        reset_registries,
        clear_registrations,
    )
    from .object_field_binding import ObjectFieldBinding
    from .editor_registry import EditorMeta, QtABCMeta, get_editor_class, editor_id_for_annotation
    from .layout_constants import PolyFieldLayoutConfig

_EXPORTS = {
    "ContractMeta": ("pyqt_polyfield.forms.contract_meta", "ContractMeta"),
    "is_contract": ("pyqt_polyfield.forms.contract_meta", "is_contract"),
    "VariantEntry": ("pyqt_polyfield.forms.variant_registry", "VariantEntry"),
    "VariantRegistry": ("pyqt_polyfield.forms.variant_registry", "VariantRegistry"),
    "register_variant": ("pyqt_polyfield.forms.variant_registry", "register_variant"),
    "register_variant_source": ("pyqt_polyfield.forms.variant_registry", "register_variant_source"),
    "get_variant_registry": ("pyqt_polyfield.forms.variant_registry", "get_variant_registry"),
    "reset_registries": ("pyqt_polyfield.forms.variant_registry", "reset_registries"),
    "clear_registrations": ("pyqt_polyfield.forms.variant_registry", "clear_registrations"),
    "ObjectFieldBinding": ("pyqt_polyfield.forms.object_field_binding", "ObjectFieldBinding"),
    "EditorMeta": ("pyqt_polyfield.forms.editor_registry", "EditorMeta"),
    "QtABCMeta": ("pyqt_polyfield.forms.editor_registry", "QtABCMeta"),
    "get_editor_class": ("pyqt_polyfield.forms.editor_registry", "get_editor_class"),
    "editor_id_for_annotation": ("pyqt_polyfield.forms.editor_registry", "editor_id_for_annotation"),
    "PolyFieldLayoutConfig": ("pyqt_polyfield.forms.layout_constants", "PolyFieldLayoutConfig"),
}


def __getattr__(name: str):
    if name in _EXPORTS:
        module_name, attr = _EXPORTS[name]
        module = importlib.import_module(module_name)
        value = getattr(module, attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_EXPORTS.keys())
