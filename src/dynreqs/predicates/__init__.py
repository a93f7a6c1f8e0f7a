"""Named predicates that conditions are built from.

Components:
- models: Predicate and PredicateContext dataclasses
- registry: PredicateRegistry - catalog of predicates, plus default_registry
- builtins: The built-in predicates (can_xs, has_module, is_os, y_n, ...)
"""

from __future__ import annotations

# Import builtins module to register built-in predicates
from dynreqs.predicates import builtins as _builtins  # noqa: F401
from dynreqs.predicates.models import Predicate, PredicateContext
from dynreqs.predicates.registry import PredicateRegistry, default_registry

__all__ = [
    "Predicate",
    "PredicateContext",
    "PredicateRegistry",
    "default_registry",
]
