"""Variant render strategy protocol for pluggable sub-field drawing.

Allows applications to supply how one concrete variant's own data is measured
and drawn, without the selection controller knowing about that variant.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class VariantRenderStrategy(ABC):
    """ABC for the height/draw capability of one variant's sub-fields.

    A height of zero means the variant has no expandable content; the
    controller then suppresses the foldout entirely.

    Example:
        from pyqt_polyfield.protocols import register_render_strategy

        register_render_strategy(StandardNameGenerator, StandardNameGeneratorStrategy())
    """

    @abstractmethod
    def height(self, instance: Any) -> int:
        """Get the total rendered height of the instance's sub-fields.

        Args:
            instance: The bound instance

        Returns:
            Height in pixels, 0 when there is nothing to draw
        """
        pass

    @abstractmethod
    def draw(self, position: Any, instance: Any) -> None:
        """Draw the instance's sub-fields top-to-bottom.

        Args:
            position: Host drawing area (a container QWidget for the Qt views)
            instance: The bound instance
        """
        pass


class NullRenderStrategy(VariantRenderStrategy):
    """Strategy for variants without sub-fields."""

    def height(self, instance: Any) -> int:
        return 0

    def draw(self, position: Any, instance: Any) -> None:
        pass


# Global strategy table (set by application), keyed by variant type
_render_strategies: Dict[type, VariantRenderStrategy] = {}


def register_render_strategy(variant_type: type, strategy: VariantRenderStrategy) -> None:
    """Register the render strategy used for a variant type and its subclasses.

    Args:
        variant_type: Concrete variant class
        strategy: Object implementing VariantRenderStrategy
    """
    if variant_type in _render_strategies:
        logger.warning(
            f"Render strategy for {variant_type.__name__} already registered. Overwriting."
        )
    _render_strategies[variant_type] = strategy


def get_render_strategy(variant_type: type) -> Optional[VariantRenderStrategy]:
    """Get the registered strategy for a type, searching its MRO.

    Returns:
        Registered strategy or None if none matches
    """
    for klass in variant_type.__mro__:
        strategy = _render_strategies.get(klass)
        if strategy is not None:
            return strategy
    return None


def clear_render_strategies() -> None:
    """Drop every registered render strategy."""
    _render_strategies.clear()
