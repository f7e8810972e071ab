"""
Base for services that pick a handler by enum member.

A subclass maps every member of its strategy enum to a handler, and
classifies each incoming context object into one member. The menu builder
uses it to choose between the flat and categorized layouts.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, Generic, Mapping, TypeVar
import logging

logger = logging.getLogger(__name__)

StrategyEnum = TypeVar('StrategyEnum', bound=Enum)


class EnumDispatchService(ABC, Generic[StrategyEnum]):
    """Routes a context object to the handler of its strategy member."""

    def __init__(self):
        self._handlers: Dict[StrategyEnum, Callable[[Any], Any]] = {}

    def _register_handlers(self, handlers: Mapping[StrategyEnum, Callable[[Any], Any]]) -> None:
        """
        Install the handler table.

        Raises:
            ValueError: If the table is empty
        """
        if not handlers:
            raise ValueError(f"{type(self).__name__} needs at least one handler")
        self._handlers = dict(handlers)

    @abstractmethod
    def _determine_strategy(self, context: Any) -> StrategyEnum:
        """Classify the context into a strategy member."""

    def dispatch(self, context: Any) -> Any:
        """
        Run the handler registered for the context's strategy.

        Raises:
            KeyError: If no handler covers the strategy
        """
        strategy = self._determine_strategy(context)
        handler = self._handlers.get(strategy)
        if handler is None:
            raise KeyError(
                f"{type(self).__name__} has no handler for {strategy}; "
                f"known: {[member.name for member in self._handlers]}"
            )
        logger.debug(f"{type(self).__name__} -> {strategy.name}")
        return handler(context)
