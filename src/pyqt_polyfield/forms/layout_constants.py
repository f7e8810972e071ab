"""
Layout constants for polymorphic fields.

Centralizes line metrics, spacing and indentation so that measured heights
and the widgets built from them agree.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PolyFieldLayoutConfig:
    """Configuration for polymorphic field layout metrics."""

    # Height of one selector row (label + dropdown) and of one sub-field row
    line_height: int = 22

    # Vertical spacing between the selector row and its content, and between sub-field rows
    vertical_spacing: int = 2

    # Horizontal offset applied per indent level of nested content
    indent_width: int = 15

    # Width reserved for the field label before the dropdown
    label_width: int = 150

    # Spacing between label and dropdown within the selector row
    row_spacing: int = 2


# Default compact configuration
COMPACT_LAYOUT = PolyFieldLayoutConfig()

SPACIOUS_LAYOUT = PolyFieldLayoutConfig(
    line_height=26,
    vertical_spacing=4,
    indent_width=20,
    label_width=180,
    row_spacing=6,
)

# Current active configuration - change this to switch layouts globally
CURRENT_LAYOUT = COMPACT_LAYOUT
