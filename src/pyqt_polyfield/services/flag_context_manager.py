"""
Scoped boolean guards on field views.

PolymorphicFieldWidget carries two guards:
- _syncing_view: set while the controller pushes state into the widgets, so
  programmatic foldout changes are not mistaken for user toggles
- _dispatching: set while a menu command is applied, so a second command
  arriving from a nested event loop is dropped

    with FlagContextManager.manage_flags(self, _syncing_view=True):
        self._controller.render(self, self._binding, self._label_text)
"""

from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterator, Set
import logging

logger = logging.getLogger(__name__)


class ViewFlag(Enum):
    """Attribute names accepted by FlagContextManager."""
    SYNCING_VIEW = '_syncing_view'
    DISPATCHING = '_dispatching'


class FlagContextManager:
    """Raises guards for the duration of a block."""

    VALID_FLAGS: Set[str] = {flag.value for flag in ViewFlag}

    @staticmethod
    @contextmanager
    def manage_flags(view: Any, **flags: bool) -> Iterator[None]:
        """
        Assign the given guards on view, then put the old values back.

        Raises:
            ValueError: If a name is not a ViewFlag value
            AttributeError: If view has not initialized a guard
        """
        unknown = sorted(set(flags) - FlagContextManager.VALID_FLAGS)
        if unknown:
            raise ValueError(
                f"Invalid flags: {unknown}. Known view flags: {sorted(FlagContextManager.VALID_FLAGS)}"
            )

        saved: Dict[str, bool] = {name: getattr(view, name) for name in flags}
        for name, value in flags.items():
            setattr(view, name, value)
        try:
            yield
        finally:
            for name, value in saved.items():
                setattr(view, name, value)
