"""Node path search over Python ASTs.

This module finds the path from the root of a tree down to the last node
satisfying a predicate. "Last" means last in pre-order traversal with
children visited in ``ast.iter_child_nodes`` order, so when a name is
defined twice in one file the later definition wins, just like at runtime.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Callable


class LastPathVisitor(ast.NodeVisitor):
    """AST visitor that remembers the path to the last matching node."""

    def __init__(self, predicate: Callable[[ast.AST], bool]) -> None:
        self.predicate = predicate
        self.path: list[ast.AST] = []
        self._stack: list[ast.AST] = []

    def visit(self, node: ast.AST) -> None:
        """Check the node, then descend into its children."""
        self._stack.append(node)
        if self.predicate(node):
            self.path = list(self._stack)
        self.generic_visit(node)
        self._stack.pop()


def find_last_path(tree: ast.AST, predicate: Callable[[ast.AST], bool]) -> list[ast.AST]:
    """Find the path to the last node in traversal order matching a predicate.

    Args:
        tree: The AST to search.
        predicate: Test applied to every node.

    Returns:
        Nodes from ``tree`` down to the match, outermost first. Empty if no
        node matches.

    Example:
        >>> tree = ast.parse('def foo(): return 1\\ndef foo(): return 2')
        >>> path = find_last_path(tree, lambda n: isinstance(n, ast.FunctionDef))
        >>> path[-1].lineno
        2
    """
    visitor = LastPathVisitor(predicate)
    visitor.visit(tree)
    return visitor.path
