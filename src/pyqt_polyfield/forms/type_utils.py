"""Type annotation helpers shared by bindings and editors."""

from enum import Enum
from typing import Any, Type, Union, get_args, get_origin
import types

# Types whose storage holds plain values, never contract implementations
SCALAR_TYPES = (str, int, float, bool, bytes, complex, list, tuple, dict, set, frozenset)


def resolve_optional(param_type: Type) -> Type:
    """Resolve Optional[T] (or T | None) to T."""
    if get_origin(param_type) in (Union, types.UnionType):
        args = get_args(param_type)
        if len(args) == 2 and type(None) in args:
            return next(arg for arg in args if arg is not type(None))
    return param_type


def is_enum(param_type: Any) -> bool:
    """Check if type is an Enum."""
    return isinstance(param_type, type) and issubclass(param_type, Enum)


def is_polymorphic_capable(param_type: Any) -> bool:
    """Check whether a field of this type can store any implementation of it.

    Scalars, containers, enums and parametrized generics cannot; any other
    class can.
    """
    resolved = resolve_optional(param_type)
    if not isinstance(resolved, type):
        return False
    if is_enum(resolved):
        return False
    return not issubclass(resolved, SCALAR_TYPES)
