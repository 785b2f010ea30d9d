"""Match variants: what a matching definition looks like and what it becomes.

The evaluator owns the search and the skip policy; a variant supplies the
two pieces that differ between kinds of methods: the node predicate and the
Subject subclass built from the match.
"""

from __future__ import annotations

import ast
from typing import (
    TYPE_CHECKING,
    ClassVar,
    Protocol,
    runtime_checkable,
)

from gremlin_subjects.subject import (
    ClassMethodSubject,
    FunctionSubject,
    InstanceMethodSubject,
    StaticMethodSubject,
    Subject,
)


if TYPE_CHECKING:
    from gremlin_subjects.env import WarningSink
    from gremlin_subjects.subject import Context


LAMBDA_NAME = '<lambda>'

METHOD_DECORATORS = frozenset({'classmethod', 'staticmethod'})


@runtime_checkable
class MatchVariant(Protocol):
    """Protocol for all match variants.

    Attributes:
        name: Unique identifier for this variant (e.g., 'instance', 'classmethod').
    """

    @property
    def name(self) -> str:
        """Return unique identifier for this variant."""
        ...

    def match(self, node: ast.AST, method_name: str, source_line: int) -> bool:
        """Return True if the node defines the method.

        Args:
            node: The AST node to check.
            method_name: Name of the target method.
            source_line: First line of the target method's code object.

        Returns:
            True if this node is the method's definition.
        """
        ...

    def build_subject(self, *, context: Context, node: ast.AST, warnings: WarningSink) -> Subject:
        """Return the subject for a matched node."""
        ...


def decorator_names(node: ast.FunctionDef | ast.AsyncFunctionDef) -> set[str]:
    """Return the bare names of a definition's decorators.

    ``@classmethod`` and ``@builtins.classmethod`` both yield 'classmethod';
    decorator calls like ``@cache(maxsize=1)`` yield 'cache'.
    """
    names: set[str] = set()
    for decorator in node.decorator_list:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        if isinstance(target, ast.Name):
            names.add(target.id)
        elif isinstance(target, ast.Attribute):
            names.add(target.attr)
    return names


def first_line(node: ast.FunctionDef | ast.AsyncFunctionDef) -> int:
    """Return the line a code object reports for this definition.

    For decorated functions that is the first decorator, not the ``def``.
    """
    return min([node.lineno, *(d.lineno for d in node.decorator_list)])


class DefinitionVariant:
    """Base for variants matching ``def`` and ``async def`` nodes."""

    NAME: ClassVar[str]
    SUBJECT_CLASS: ClassVar[type[Subject]]

    @property
    def name(self) -> str:
        return self.NAME

    def accepts_decorators(self, names: set[str]) -> bool:
        """Return True if a definition with these decorators is this kind of method."""
        return not names & METHOD_DECORATORS

    def match(self, node: ast.AST, method_name: str, source_line: int) -> bool:
        if isinstance(node, ast.Lambda):
            return method_name == LAMBDA_NAME and node.lineno == source_line
        if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            return False
        return (
            node.name == method_name
            and first_line(node) == source_line
            and self.accepts_decorators(decorator_names(node))
        )

    def build_subject(self, *, context: Context, node: ast.AST, warnings: WarningSink) -> Subject:
        return self.SUBJECT_CLASS(context=context, node=node, warnings=warnings)


class FunctionVariant(DefinitionVariant):
    """Module-level functions."""

    NAME = 'function'
    SUBJECT_CLASS = FunctionSubject


class InstanceMethodVariant(DefinitionVariant):
    """Plain methods defined in a class body."""

    NAME = 'instance'
    SUBJECT_CLASS = InstanceMethodSubject


class ClassMethodVariant(DefinitionVariant):
    """Methods decorated with ``@classmethod``."""

    NAME = 'classmethod'
    SUBJECT_CLASS = ClassMethodSubject

    def accepts_decorators(self, names: set[str]) -> bool:
        return 'classmethod' in names


class StaticMethodVariant(DefinitionVariant):
    """Methods decorated with ``@staticmethod``."""

    NAME = 'staticmethod'
    SUBJECT_CLASS = StaticMethodSubject

    def accepts_decorators(self, names: set[str]) -> bool:
        return 'staticmethod' in names
