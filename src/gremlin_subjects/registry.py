"""Central registry for match variants.

This module provides the VariantRegistry class which maps variant names
to the variant classes that implement them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gremlin_subjects.variants import (
    ClassMethodVariant,
    FunctionVariant,
    InstanceMethodVariant,
    StaticMethodVariant,
)


if TYPE_CHECKING:
    from gremlin_subjects.variants import MatchVariant


class VariantRegistry:
    """Central registry for match variants.

    Example:
        >>> registry = VariantRegistry()
        >>> registry.register(InstanceMethodVariant)
        >>> registry.available()
        ['instance']
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._variants: dict[str, type[MatchVariant]] = {}

    def register(self, variant_class: type[MatchVariant], name: str | None = None) -> None:
        """Register a variant class, under its own name unless one is given.

        Registering a name twice replaces the earlier variant, which lets
        callers override a built-in kind of method.
        """
        key = name if name is not None else variant_class().name
        self._variants[key] = variant_class

    def get(self, name: str) -> MatchVariant:
        """Get a variant instance by name.

        Raises:
            KeyError: If no variant is registered with the given name.
        """
        if name not in self._variants:
            raise KeyError(f"Unknown variant: '{name}'")
        return self._variants[name]()

    def available(self) -> list[str]:
        """List all registered variant names."""
        return list(self._variants.keys())


def default_registry() -> VariantRegistry:
    """Return a registry holding the built-in variants."""
    registry = VariantRegistry()
    for variant_class in (FunctionVariant, InstanceMethodVariant, ClassMethodVariant, StaticMethodVariant):
        registry.register(variant_class)
    return registry
