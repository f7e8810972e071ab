"""
pyqt-polyfield: polymorphic field selection for PyQt6 editing tools.

A field whose value may be any implementation (variant) of a shared
contract: the user picks the implementation from a dropdown menu and the
chosen instance's own sub-fields are edited underneath it.

Architecture:
- Protocols: field binding, render strategy, view and menu contracts
- Forms: contract metaclass, per-contract variant registry, reference binding
- Services: selection controller, menu building, name processing
- Widgets: PyQt6 field widget, menu widget, dataclass render strategy

Key Features:
- Registration-table discovery (no runtime type scanning)
- Explicit default variants
- Flat or first-letter categorized menus
- Transactional, never half-applied selection
"""

__version__ = "0.1.0"

from pyqt_polyfield.exceptions import (
    PolyFieldError,
    DiscoveryError,
    InstantiationError,
    ConfigurationError,
)
from pyqt_polyfield.forms.contract_meta import ContractMeta, is_contract
from pyqt_polyfield.forms.variant_registry import (
    VariantEntry,
    VariantRegistry,
    register_variant,
    register_variant_source,
    get_variant_registry,
    reset_registries,
)
from pyqt_polyfield.forms.object_field_binding import ObjectFieldBinding
from pyqt_polyfield.protocols import (
    FieldBinding,
    VariantRenderStrategy,
    register_render_strategy,
    PolyFieldConfig,
    set_polyfield_config,
    get_polyfield_config,
)
from pyqt_polyfield.services.selection_controller import PolymorphicSelectionController

__all__ = [
    "__version__",
    "PolyFieldError",
    "DiscoveryError",
    "InstantiationError",
    "ConfigurationError",
    "ContractMeta",
    "is_contract",
    "VariantEntry",
    "VariantRegistry",
    "register_variant",
    "register_variant_source",
    "get_variant_registry",
    "reset_registries",
    "ObjectFieldBinding",
    "FieldBinding",
    "VariantRenderStrategy",
    "register_render_strategy",
    "PolyFieldConfig",
    "set_polyfield_config",
    "get_polyfield_config",
    "PolymorphicSelectionController",
]
