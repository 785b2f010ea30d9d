"""Resolution of one live method to at most one subject.

An Evaluator is built for a single (scope, method, env) triple and used
once. It checks that the method's code points at a readable file, parses
that file, searches it for the method's definition and, unless the
definition sits inside a closure, wraps it in a Subject. Every derived value
is computed once and cached for the evaluator's lifetime.
"""

from __future__ import annotations

import ast
from functools import cached_property
import logging
from typing import TYPE_CHECKING

from gremlin_subjects.ast_path import find_last_path
from gremlin_subjects.subject import Context


if TYPE_CHECKING:
    from pathlib import Path

    from gremlin_subjects.env import Env
    from gremlin_subjects.subject import Subject
    from gremlin_subjects.target import SourceLocation, TargetMethod
    from gremlin_subjects.variants import MatchVariant


logger = logging.getLogger(__name__)

SOURCE_LOCATION_WARNING_FORMAT = '%s does not have a valid source location, unable to emit subject'

CLOSURE_WARNING_FORMAT = '%s is dynamically defined in a closure, unable to emit subject'

FUNCTION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef)


def is_closure_path(path: list[ast.AST]) -> bool:
    """Return True if a node path passes through a closure.

    A lambda anywhere on the path is a closure, and so is any function
    definition enclosing the last node.
    """
    return any(isinstance(node, ast.Lambda) for node in path) or any(
        isinstance(node, FUNCTION_NODES) for node in path[:-1]
    )


class Evaluator:
    """Resolves a target method to a subject, or explains why it cannot."""

    def __init__(
        self,
        scope: object,
        target_method: TargetMethod,
        env: Env,
        variant: MatchVariant,
    ) -> None:
        self.scope = scope
        self.target_method = target_method
        self.env = env
        self.variant = variant

    def call(self) -> list[Subject]:
        """Return the matched subject, if any.

        Returns:
            A list holding the subject, or an empty list if the method was
            skipped or no definition matched.
        """
        if self.skipped:
            return []
        subject = self.subject
        return [subject] if subject is not None else []

    @cached_property
    def skipped(self) -> bool:
        """Decide whether to skip the method, warning once if so."""
        location = self.source_location
        if location is None or self.env.denies(location.path):
            self.env.warn(SOURCE_LOCATION_WARNING_FORMAT % self.target_method)
            return True
        if is_closure_path(self.matched_node_path):
            self.env.warn(CLOSURE_WARNING_FORMAT % self.target_method)
            return True
        return False

    @property
    def method_name(self) -> str:
        return self.target_method.name

    @property
    def source_location(self) -> SourceLocation | None:
        return self.target_method.source_location

    @property
    def source_line(self) -> int:
        return self.source_location.line  # type: ignore[union-attr]

    @cached_property
    def source_path(self) -> Path:
        return self.env.pathname(self.source_location.path)  # type: ignore[union-attr]

    @property
    def context(self) -> Context:
        return Context(self.scope, self.source_path)

    @cached_property
    def tree(self) -> ast.Module:
        """Parse the method's source file; parse and I/O errors propagate."""
        return self.env.parser(self.source_path)

    def match(self, node: ast.AST) -> bool:
        return self.variant.match(node, self.method_name, self.source_line)

    @cached_property
    def matched_node_path(self) -> list[ast.AST]:
        return find_last_path(self.tree, self.match)

    @cached_property
    def subject(self) -> Subject | None:
        """Build the subject from the deepest matched node."""
        if not self.matched_node_path:
            logger.debug('No definition of %s found in %s', self.target_method, self.source_path)
            return None
        node = self.matched_node_path[-1]
        logger.debug('Matched %s at %s:%d', self.target_method, self.source_path, node.lineno)  # type: ignore[attr-defined]
        return self.variant.build_subject(context=self.context, node=node, warnings=self.env.warnings)
