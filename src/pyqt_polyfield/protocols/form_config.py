"""Global configuration for polymorphic field editing.

Provides hooks for applications to customize menu building and feedback.
"""

from typing import Optional
from dataclasses import dataclass, field

from pyqt_polyfield.forms.layout_constants import PolyFieldLayoutConfig, CURRENT_LAYOUT


@dataclass
class PolyFieldConfig:
    """Base configuration for polymorphic field behavior.

    Applications can subclass this to provide custom configuration.

    Attributes:
        flat_menu_limit: Largest variant count listed as a flat menu; larger
            registries are grouped by the first letter of the display name
        category_separator: Separator between category and entry in menu label paths
        none_label: Text shown for an unbound field and its menu entry
        notice_timeout_ms: How long an instantiation failure notice stays visible
        entry_point_group: Entry point group scanned for variant modules
        layout: Spacing and line metrics used for height computation
    """

    flat_menu_limit: int = 10
    category_separator: str = "/"
    none_label: str = "None"
    notice_timeout_ms: int = 3000
    entry_point_group: str = "pyqt_polyfield.variants"
    layout: PolyFieldLayoutConfig = field(default_factory=lambda: CURRENT_LAYOUT)


# Global config instance (set by application)
_polyfield_config: Optional[PolyFieldConfig] = None


def set_polyfield_config(config: Optional[PolyFieldConfig]) -> None:
    """Set the global polymorphic field configuration.

    Args:
        config: PolyFieldConfig instance, or None to restore defaults
    """
    global _polyfield_config
    _polyfield_config = config


def get_polyfield_config() -> PolyFieldConfig:
    """Get the current polymorphic field configuration.

    Returns:
        Current PolyFieldConfig or default if not set
    """
    if _polyfield_config is None:
        return PolyFieldConfig()
    return _polyfield_config
