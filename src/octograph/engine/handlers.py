"""
Root field handlers.

Each field of the query root is bound to a handler object through an
explicit registry built at startup, so tests can inject fakes in place of
the real data source.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterator
from typing import Any

from .errors import DuplicateHandlerError


class RootFieldHandler(ABC):
    """Produces the value of one root field."""

    @abstractmethod
    async def resolve(self, arguments: dict[str, Any], context: Any) -> Any:
        """
        Produce the result for a root field.

        Args:
            arguments: Coerced arguments, defaults already applied
            context: Per-request execution context

        Returns:
            A plain data object (tagged with ``type`` when the field is an
            interface) or None

        Raises:
            ArgumentValidationError: If the arguments are semantically invalid
            DataSourceError: If the external collaborator fails
        """
        ...


class FunctionHandler(RootFieldHandler):
    """Adapts a plain function or coroutine function taking keyword arguments."""

    def __init__(self, func: Callable[..., Any | Awaitable[Any]], pass_context: bool = False):
        self.func = func
        self.pass_context = pass_context

    async def resolve(self, arguments: dict[str, Any], context: Any) -> Any:
        if self.pass_context:
            result = self.func(context, **arguments)
        else:
            result = self.func(**arguments)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"<FunctionHandler {getattr(self.func, '__name__', self.func)!r}>"


class HandlerRegistry:
    """Mapping from root field name to its handler."""

    def __init__(self) -> None:
        self._handlers: dict[str, RootFieldHandler] = {}

    def register(
        self, field_name: str, handler: RootFieldHandler | Callable[..., Any]
    ) -> RootFieldHandler:
        """
        Bind a handler to a root field.

        Plain callables are wrapped in a FunctionHandler.

        Raises:
            DuplicateHandlerError: If the field already has a handler
        """
        if field_name in self._handlers:
            raise DuplicateHandlerError(field_name)
        if not isinstance(handler, RootFieldHandler):
            handler = FunctionHandler(handler)
        self._handlers[field_name] = handler
        return handler

    def get(self, field_name: str) -> RootFieldHandler | None:
        return self._handlers.get(field_name)

    def names(self) -> list[str]:
        return list(self._handlers.keys())

    def __contains__(self, field_name: str) -> bool:
        return field_name in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)
