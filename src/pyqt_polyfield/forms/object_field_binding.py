"""
Field binding over an attribute of a host object.

Reference FieldBinding for hosts whose document model is made of plain
objects or dataclasses: the field is one attribute, writes happen on commit.
"""

from typing import Any, Callable, List, Optional, get_type_hints
import logging

from pyqt_polyfield.protocols.field_binding import FieldBinding
from .type_utils import is_polymorphic_capable, resolve_optional

logger = logging.getLogger(__name__)

_UNSET = object()


class ObjectFieldBinding(FieldBinding):
    """
    Binds the attribute field_name of owner.

    A transaction stages the assigned value; commit() writes it with setattr
    and then notifies listeners, abort() drops it. The expand flag lives on
    the binding.

    Example:
        binding = ObjectFieldBinding(character, "name_generator")
        with binding.transaction():
            binding.assign(StandardNameGenerator())
    """

    def __init__(
        self,
        owner: Any,
        field_name: str,
        *,
        contract_type: Optional[type] = None,
        field_id: Optional[str] = None,
        expanded: bool = False,
    ):
        self.owner = owner
        self.field_name = field_name
        self._contract_type = contract_type if contract_type is not None else self._annotated_type()
        self._field_id = field_id or f"{type(owner).__qualname__}.{field_name}@{id(owner):x}"
        self._expanded = expanded
        self._staged: Any = _UNSET
        self._in_update = False
        self._listeners: List[Callable[[Any], None]] = []

    def _annotated_type(self) -> Optional[type]:
        try:
            hints = get_type_hints(type(self.owner))
        except (NameError, TypeError) as exc:
            logger.debug(f"Could not resolve type hints of {type(self.owner).__name__}: {exc}")
            hints = getattr(type(self.owner), '__annotations__', {})
        annotation = hints.get(self.field_name)
        return None if annotation is None else resolve_optional(annotation)

    @property
    def field_id(self) -> str:
        return self._field_id

    @property
    def contract_type(self) -> Optional[type]:
        return self._contract_type

    @property
    def supports_polymorphic(self) -> bool:
        return self._contract_type is not None and is_polymorphic_capable(self._contract_type)

    @property
    def in_update(self) -> bool:
        return self._in_update

    def get_value(self) -> Any:
        return getattr(self.owner, self.field_name, None)

    def is_expanded(self) -> bool:
        return self._expanded

    def set_expanded(self, expanded: bool) -> None:
        self._expanded = bool(expanded)

    def begin_update(self) -> None:
        if self._in_update:
            raise RuntimeError(f"Field '{self.field_id}' is already being updated")
        self._in_update = True
        self._staged = _UNSET

    def assign(self, value: Any) -> None:
        if not self._in_update:
            raise RuntimeError(f"assign() outside of an update of field '{self.field_id}'")
        self._staged = value

    def commit(self) -> None:
        if not self._in_update:
            raise RuntimeError(f"commit() outside of an update of field '{self.field_id}'")

        if self._staged is not _UNSET:
            setattr(self.owner, self.field_name, self._staged)
            committed = self._staged
            self._end_update()
            logger.debug(f"Committed '{self.field_id}' = {type(committed).__name__}")
            self._notify(committed)
        else:
            self._end_update()

    def _notify(self, value: Any) -> None:
        # The write already happened; a failing listener must not undo it
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception as e:
                logger.error(f"Listener {listener!r} of '{self.field_id}' failed: {e}", exc_info=True)

    def abort(self) -> None:
        if self._in_update:
            logger.debug(f"Discarded staged value of '{self.field_id}'")
        self._end_update()

    def _end_update(self) -> None:
        self._staged = _UNSET
        self._in_update = False

    def add_listener(self, callback: Callable[[Any], None]) -> None:
        """Call callback with the new value after every commit."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[Any], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)
