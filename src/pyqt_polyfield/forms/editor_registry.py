"""
Editor registry with metaclass auto-registration.

Sub-field editors register themselves when their classes are defined, keyed
by an editor id and by the value types they can edit. Render strategies
look up an editor class from a field's type annotation.

Design:
- EditorMeta metaclass handles auto-registration
- EDITOR_IMPLEMENTATIONS: editor_id -> editor class
- EDITOR_VALUE_TYPES: value type -> editor_id
- Fail-loud on unknown editor ids
"""

from abc import ABCMeta
from enum import Enum
from typing import Any, Dict, Optional, Type, get_args, get_origin
import logging

from PyQt6.QtCore import QObject

from pyqt_polyfield.forms.type_utils import resolve_optional

logger = logging.getLogger(__name__)

# Maps editor_id -> editor class
EDITOR_IMPLEMENTATIONS: Dict[str, Type] = {}

# Maps edited value type -> editor_id
EDITOR_VALUE_TYPES: Dict[Any, str] = {}

# Pseudo value types for annotations that are not plain classes
ENUM_VALUE_TYPE = Enum
STRING_LIST_VALUE_TYPE = "list[str]"


class QtABCMeta(ABCMeta, type(QObject)):
    """Metaclass for Qt widgets that also implement ABC contracts."""


class EditorMeta(QtABCMeta):
    """
    Metaclass for sub-field editors with auto-registration.

    A class registers when it declares _editor_id in its own body; classes
    without one (intermediate bases) are skipped. _value_types lists the
    value types the editor handles.

    Example:
        class LineEditAdapter(QLineEdit, ValueGettable, ValueSettable,
                              metaclass=EditorMeta):
            _editor_id = "line_edit"
            _value_types = (str,)
    """

    def __new__(mcs, name, bases, attrs):
        new_class = super().__new__(mcs, name, bases, attrs)

        editor_id = attrs.get('_editor_id')
        if editor_id is None:
            logger.debug(f"Skipping registration for {name} - no _editor_id attribute")
            return new_class

        if editor_id in EDITOR_IMPLEMENTATIONS:
            existing = EDITOR_IMPLEMENTATIONS[editor_id]
            logger.warning(
                f"Editor ID '{editor_id}' already registered to {existing.__name__}. "
                f"Overwriting with {name}."
            )
        EDITOR_IMPLEMENTATIONS[editor_id] = new_class

        for value_type in attrs.get('_value_types', ()):
            EDITOR_VALUE_TYPES[value_type] = editor_id

        logger.debug(f"Auto-registered {name} as '{editor_id}' for {attrs.get('_value_types', ())}")
        return new_class


def get_editor_class(editor_id: str) -> Type:
    """
    Get editor class by ID.

    Raises:
        KeyError: If editor_id not registered
    """
    if editor_id not in EDITOR_IMPLEMENTATIONS:
        raise KeyError(
            f"No editor registered with ID '{editor_id}'. "
            f"Available editors: {list(EDITOR_IMPLEMENTATIONS.keys())}"
        )
    return EDITOR_IMPLEMENTATIONS[editor_id]


def editor_id_for_annotation(annotation: Any) -> Optional[str]:
    """
    Find the editor registered for a field annotation.

    Optional[T] resolves to T, Enum subclasses share one editor and
    list/tuple of str map to the string list editor.

    Returns:
        The editor id, or None when no editor handles the type
    """
    value_type = resolve_optional(annotation)

    if get_origin(value_type) in (list, tuple):
        args = [arg for arg in get_args(value_type) if arg is not Ellipsis]
        if args and all(arg is str for arg in args):
            return EDITOR_VALUE_TYPES.get(STRING_LIST_VALUE_TYPE)
        return None

    if isinstance(value_type, type) and issubclass(value_type, Enum):
        return EDITOR_VALUE_TYPES.get(ENUM_VALUE_TYPE)

    # Exact lookup: bool must not fall through to the int editor
    return EDITOR_VALUE_TYPES.get(value_type)
