"""Runtime side of the match: methods as the interpreter sees them.

A target method is anything that can report a name and, optionally, the file
and line where its code starts. RuntimeMethod adapts a live Python callable
to that shape by reading its code object.
"""

from __future__ import annotations

import functools
import inspect
from typing import TYPE_CHECKING, NamedTuple, Protocol


if TYPE_CHECKING:
    from collections.abc import Callable
    import types


class SourceLocation(NamedTuple):
    """File and first line of a method's defining code.

    Attributes:
        path: The code object's filename (may be a pseudo-filename like '<string>').
        line: The first line number of the code object.
    """

    path: str
    line: int


class TargetMethod(Protocol):
    """Protocol for methods handed to a matcher."""

    @property
    def name(self) -> str:
        """Return the method's name as written in its definition."""
        ...

    @property
    def source_location(self) -> SourceLocation | None:
        """Return where the method's code starts, or None if unknown."""
        ...


def _unwrap(obj: object) -> object:
    """Strip descriptors, bound methods and decorator wrappers from a callable.

    Properties resolve to their getter and cached properties to the wrapped function.
    """
    if isinstance(obj, property) and obj.fget is not None:
        obj = obj.fget
    elif isinstance(obj, functools.cached_property):
        obj = obj.func
    if isinstance(obj, (classmethod, staticmethod)):
        obj = obj.__func__
    if inspect.ismethod(obj):
        obj = obj.__func__
    if callable(obj):
        obj = inspect.unwrap(obj)  # type: ignore[arg-type]
    return obj


class RuntimeMethod:
    """TargetMethod adapter over a live function, method or descriptor.

    Example:
        >>> def greet():
        ...     return 'hello'
        >>> RuntimeMethod(greet).name
        'greet'
    """

    def __init__(self, obj: Callable[..., object] | classmethod | staticmethod | property) -> None:
        self._obj = obj
        self._function = _unwrap(obj)

    @property
    def name(self) -> str:
        return getattr(self._function, '__name__', repr(self._function))

    @property
    def code(self) -> types.CodeType | None:
        """Return the underlying code object, if the callable has one."""
        return getattr(self._function, '__code__', None)

    @property
    def source_location(self) -> SourceLocation | None:
        code = self.code
        if code is None:
            return None
        return SourceLocation(code.co_filename, code.co_firstlineno)

    def __str__(self) -> str:
        module = getattr(self._function, '__module__', None)
        qualname = getattr(self._function, '__qualname__', self.name)
        return f'{module}.{qualname}' if module else qualname

    def __repr__(self) -> str:
        return f'RuntimeMethod({self})'
