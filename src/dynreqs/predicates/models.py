"""Dataclass models for the predicate system.

This module defines the core data structures for predicates:
- PredicateContext: The read-only state every predicate is evaluated against
- Predicate: A named boolean test with its arity and description
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from dynreqs.build_config import ConfigAccessor
from dynreqs.host import HostContext

PredicateFn = Callable[..., bool]


@dataclass(frozen=True, slots=True)
class PredicateContext:
    """Evaluation context passed to every predicate.

    Attributes:
        config: Build configuration accessor (anything with ``get(key)``).
        host: Host facts: OS identity, environment, search path, terminal.
        pureperl_only: True if the caller asked for a build without native
            code, False if they explicitly asked for a compiled build, None
            if they expressed no preference.
    """

    config: ConfigAccessor
    host: HostContext
    pureperl_only: bool | None = None


@dataclass(frozen=True, slots=True)
class Predicate:
    """A named boolean test over host state.

    Attributes:
        name: Name used in conditions (e.g., "is_os").
        fn: Function called as ``fn(ctx, *args)`` returning a boolean.
        min_args: Minimum number of arguments accepted.
        max_args: Maximum number of arguments accepted (None = unbounded).
        description: One-line description for listings.

    Example:
        >>> def is_os(ctx: PredicateContext, name: str) -> bool:
        ...     return ctx.host.os_name() == name
        >>> predicate = Predicate(name="is_os", fn=is_os, min_args=1, max_args=1)
    """

    name: str
    fn: PredicateFn
    min_args: int = 0
    max_args: int | None = 0
    description: str = ""

    def accepts_arity(self, count: int) -> bool:
        if count < self.min_args:
            return False
        return self.max_args is None or count <= self.max_args

    @property
    def arity(self) -> str:
        """Human-readable arity, e.g. "0", "1" or "1-2"."""
        if self.max_args is None:
            return f"{self.min_args}+"
        if self.min_args == self.max_args:
            return str(self.min_args)
        return f"{self.min_args}-{self.max_args}"

    def __call__(self, ctx: PredicateContext, *args: str) -> bool:
        return bool(self.fn(ctx, *args))
