"""
Field binding contract supplied by the host document model.

A binding holds the currently selected instance of one field plus its
expand/collapse flag, and replaces the instance only through a
begin/assign/commit transaction.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, Optional
import logging

logger = logging.getLogger(__name__)


class FieldBinding(ABC):
    """
    ABC for host-owned field storage.

    The selection controller never keeps a binding between calls; it reads the
    current value and writes new ones through transaction().
    """

    @property
    @abstractmethod
    def field_id(self) -> str:
        """Stable identifier of the field within the host document."""
        pass

    @property
    @abstractmethod
    def contract_type(self) -> Optional[type]:
        """Nominal type declared for the field."""
        pass

    @property
    @abstractmethod
    def supports_polymorphic(self) -> bool:
        """Whether the field's storage can hold any implementation of its contract."""
        pass

    @abstractmethod
    def get_value(self) -> Any:
        """
        Get the committed instance.

        Returns:
            The bound instance, or None if the field is unbound.
        """
        pass

    @abstractmethod
    def is_expanded(self) -> bool:
        pass

    @abstractmethod
    def set_expanded(self, expanded: bool) -> None:
        pass

    @abstractmethod
    def begin_update(self) -> None:
        """Open an update scope. Nested scopes are not supported."""
        pass

    @abstractmethod
    def assign(self, value: Any) -> None:
        """Stage a new value (None clears the field) inside the open update scope."""
        pass

    @abstractmethod
    def commit(self) -> None:
        """Publish the staged value and close the update scope."""
        pass

    @abstractmethod
    def abort(self) -> None:
        """Discard the staged value and close the update scope."""
        pass

    @contextmanager
    def transaction(self) -> Iterator["FieldBinding"]:
        """
        Run the body inside an update scope.

        Commits when the body completes; aborts and re-raises when the body
        or the commit itself fails, so a half-written value is never published.

        Example:
            with binding.transaction():
                binding.assign(new_instance)
        """
        self.begin_update()
        try:
            yield self
            self.commit()
        except BaseException:
            logger.debug(f"Aborting update of field '{self.field_id}'")
            self.abort()
            raise
