"""Subjects: the units of code gremlins are let loose on.

A Subject pairs the AST node defining a method with the Context it was found
in. Subjects are immutable; the concrete subclass records what kind of
definition was matched so later stages know how to swap the mutated code in.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
import types
from typing import TYPE_CHECKING, ClassVar


if TYPE_CHECKING:
    from pathlib import Path

    from gremlin_subjects.env import WarningSink


@dataclass(frozen=True)
class Context:
    """The scope a method belongs to and the file it was found in.

    Attributes:
        scope: The class or module the method was looked up on.
        source_path: Path of the file holding the method's definition.
    """

    scope: object
    source_path: Path

    @property
    def scope_name(self) -> str:
        """Return the dotted name of the scope, e.g. 'pkg.mod.Outer.Inner'."""
        if isinstance(self.scope, types.ModuleType):
            return self.scope.__name__
        module = getattr(self.scope, '__module__', None)
        qualname = getattr(self.scope, '__qualname__', None) or repr(self.scope)
        return f'{module}.{qualname}' if module else qualname

    @property
    def nesting(self) -> list[str]:
        """Return the scope name split into its dotted parts."""
        return self.scope_name.split('.')

    @property
    def unqualified_name(self) -> str:
        """Return the last part of the scope name."""
        return self.nesting[-1]


@dataclass(frozen=True)
class Subject:
    """An AST node selected for mutation.

    Attributes:
        context: Where the node was found.
        node: The ``def`` node defining the method.
        warnings: Shared sink later stages can report problems with this subject to.
    """

    KIND: ClassVar[str] = 'method'

    context: Context
    node: ast.AST
    warnings: WarningSink = field(compare=False, repr=False)

    @property
    def name(self) -> str:
        """Return the name of the defined method."""
        return getattr(self.node, 'name', '<lambda>')

    @property
    def source_path(self) -> Path:
        return self.context.source_path

    @property
    def source_line(self) -> int:
        """Return the line of the ``def`` keyword."""
        return self.node.lineno  # type: ignore[attr-defined]

    @property
    def source_lines(self) -> range:
        """Return the lines spanned by the definition, decorators included."""
        decorators = getattr(self.node, 'decorator_list', [])
        start = min([self.source_line, *(d.lineno for d in decorators)])
        end = getattr(self.node, 'end_lineno', None) or self.source_line
        return range(start, end + 1)

    @property
    def source(self) -> str:
        """Return the definition rendered back to source."""
        return ast.unparse(self.node)

    @property
    def expression(self) -> str:
        """Return the dotted expression naming this subject."""
        return f'{self.context.scope_name}.{self.name}'

    @property
    def identification(self) -> str:
        """Return a unique identifier including file and line."""
        return f'{self.expression}:{self.source_path}:{self.source_line}'


@dataclass(frozen=True)
class FunctionSubject(Subject):
    """A module-level function."""

    KIND: ClassVar[str] = 'function'


@dataclass(frozen=True)
class InstanceMethodSubject(Subject):
    """A plain method defined in a class body."""

    KIND: ClassVar[str] = 'instance'


@dataclass(frozen=True)
class ClassMethodSubject(Subject):
    """A method decorated with ``@classmethod``."""

    KIND: ClassVar[str] = 'classmethod'


@dataclass(frozen=True)
class StaticMethodSubject(Subject):
    """A method decorated with ``@staticmethod``."""

    KIND: ClassVar[str] = 'staticmethod'
