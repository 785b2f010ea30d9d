"""Method matcher: the entry point callers use to get subjects.

A MethodMatcher binds a scope, a target method and a variant. Each call
builds a fresh Evaluator for the given environment and returns its result,
so one matcher can be reused across environments.
"""

from __future__ import annotations

import inspect
import types
from typing import TYPE_CHECKING

from gremlin_subjects.evaluator import Evaluator
from gremlin_subjects.registry import default_registry
from gremlin_subjects.target import RuntimeMethod


if TYPE_CHECKING:
    from gremlin_subjects.env import Env
    from gremlin_subjects.registry import VariantRegistry
    from gremlin_subjects.subject import Subject
    from gremlin_subjects.target import TargetMethod
    from gremlin_subjects.variants import MatchVariant


def variant_name_for(scope: object, attribute: object) -> str:
    """Pick the variant name for an attribute found on a scope.

    Args:
        scope: The class or module the attribute was looked up on.
        attribute: The attribute as stored, without descriptor binding.

    Returns:
        One of 'function', 'classmethod', 'staticmethod' or 'instance'.

    Raises:
        TypeError: If the scope is neither a module nor a class.
    """
    if isinstance(scope, types.ModuleType):
        return 'function'
    if not isinstance(scope, type):
        raise TypeError(f'Expected a module or class scope, got {type(scope).__name__}')
    if isinstance(attribute, classmethod):
        return 'classmethod'
    if isinstance(attribute, staticmethod):
        return 'staticmethod'
    return 'instance'


class MethodMatcher:
    """Matches one method of a scope to its subject.

    Example:
        >>> from gremlin_subjects.env import build_env
        >>> matcher = MethodMatcher.for_name(SomeClass, 'some_method')
        >>> subjects = matcher.call(build_env())
    """

    def __init__(self, scope: object, target_method: TargetMethod, variant: MatchVariant) -> None:
        self.scope = scope
        self.target_method = target_method
        self.variant = variant

    @classmethod
    def for_name(
        cls,
        scope: object,
        name: str,
        registry: VariantRegistry | None = None,
    ) -> MethodMatcher:
        """Build a matcher for a named attribute of a class or module.

        The attribute is looked up without triggering descriptors, so
        classmethods and staticmethods are recognised as such.

        Args:
            scope: The class or module holding the method.
            name: The attribute name.
            registry: Registry to take variants from; the built-ins by default.

        Returns:
            A matcher for the attribute.

        Raises:
            AttributeError: If the scope has no such attribute.
        """
        attribute = inspect.getattr_static(scope, name)
        variants = registry if registry is not None else default_registry()
        variant = variants.get(variant_name_for(scope, attribute))
        return cls(scope, RuntimeMethod(attribute), variant)

    def call(self, env: Env) -> list[Subject]:
        """Return the matched subjects.

        Args:
            env: The environment to evaluate in.

        Returns:
            Zero or one subjects. Skipped methods are reported to
            ``env.warnings``, not raised.
        """
        return Evaluator(self.scope, self.target_method, env, self.variant).call()

    def __repr__(self) -> str:
        return f'MethodMatcher({self.target_method}, variant={self.variant.name!r})'
