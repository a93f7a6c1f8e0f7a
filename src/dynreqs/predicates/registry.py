"""Predicate registry for managing available condition commands.

This module provides the PredicateRegistry class that acts as a catalog
of named predicates. It supports registration and lookup by name. The
combinators ``and`` and ``or`` are reserved: the condition evaluator
implements them itself, so no registry may define them.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from dynreqs.constants import RESERVED_COMMANDS
from dynreqs.exceptions import UnknownCommandError
from dynreqs.logging import get_logger
from dynreqs.predicates.models import Predicate, PredicateFn

logger = get_logger(__name__)

_NAME_PATTERN = re.compile(r"\w+")


class PredicateRegistry:
    """Registry of predicates available to conditions.

    Example:
        ```python
        registry = PredicateRegistry()

        @registry.register(
            name="is_os",
            min_args=1,
            max_args=1,
            description="Current OS identifier equals name",
        )
        def is_os(ctx: PredicateContext, name: str) -> bool:
            return ctx.host.os_name() == name

        predicate = registry.get("is_os")
        ```
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._predicates: dict[str, Predicate] = {}

    def register(
        self,
        name: str,
        *,
        min_args: int = 0,
        max_args: int | None = 0,
        description: str = "",
    ) -> Callable[[PredicateFn], PredicateFn]:
        """Register a predicate function.

        Use as a decorator on a function taking ``(ctx, *args)``.

        Args:
            name: Name used in conditions.
            min_args: Minimum number of arguments.
            max_args: Maximum number of arguments (None = unbounded).
            description: One-line description for listings.

        Returns:
            Decorator function that registers the predicate.

        Raises:
            ValueError: If the name is reserved, not a bare word, or already
                registered.
        """

        def decorator(fn: PredicateFn) -> PredicateFn:
            self.register_predicate(
                Predicate(
                    name=name,
                    fn=fn,
                    min_args=min_args,
                    max_args=max_args,
                    description=description,
                )
            )
            return fn

        return decorator

    def register_predicate(self, predicate: Predicate) -> None:
        """Register a Predicate object directly.

        Raises:
            ValueError: If the name is reserved, not a bare word, or already
                registered.
        """
        name = predicate.name
        if name in RESERVED_COMMANDS:
            raise ValueError(f"Predicate name '{name}' is reserved")
        if not _NAME_PATTERN.fullmatch(name):
            raise ValueError(f"Predicate name '{name}' must be a bare word")
        if name in self._predicates:
            raise ValueError(f"Predicate '{name}' is already registered")

        self._predicates[name] = predicate
        logger.debug("predicate_registered", predicate=name)

    def get(self, name: str) -> Predicate:
        """Look up a predicate by name.

        Raises:
            UnknownCommandError: If no predicate with this name exists.
        """
        try:
            return self._predicates[name]
        except KeyError:
            raise UnknownCommandError(name) from None

    lookup = get

    def has(self, name: str) -> bool:
        return name in self._predicates

    def list_names(self) -> list[str]:
        """List all registered predicate names, sorted."""
        return sorted(self._predicates.keys())

    def list_all(self) -> list[Predicate]:
        """List all registered predicates, sorted by name."""
        return [self._predicates[name] for name in self.list_names()]

    def copy(self) -> PredicateRegistry:
        """Return an independent registry with the same predicates.

        Useful to extend the built-in set without mutating it.
        """
        registry = PredicateRegistry()
        registry._predicates = dict(self._predicates)
        return registry

    def clear(self) -> None:
        """Clear all registered predicates.

        Primarily useful for testing.
        """
        self._predicates.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._predicates

    def __len__(self) -> int:
        return len(self._predicates)


# Global registry holding the built-in predicates
default_registry = PredicateRegistry()
