"""dynreqs exception hierarchy.

This package organizes all dynreqs exceptions into domain-specific modules.
All exceptions can be imported from this package:
    from dynreqs.exceptions import UnknownCommandError, UserError
"""

from __future__ import annotations

# Base exception
from dynreqs.exceptions.base import DynreqsError

# Condition exceptions
from dynreqs.exceptions.conditions import (
    ConditionError,
    MalformedConditionError,
    PredicateArgumentError,
    UnknownCommandError,
)

# Configuration, document and version exceptions
from dynreqs.exceptions.config import ConfigError, DocumentError, VersionRangeError

# Expression entry exceptions
from dynreqs.exceptions.prereqs import (
    MalformedEntryError,
    MissingFragmentError,
    PrereqsError,
    UserError,
)

__all__ = [
    "DynreqsError",
    "ConditionError",
    "UnknownCommandError",
    "MalformedConditionError",
    "PredicateArgumentError",
    "ConfigError",
    "DocumentError",
    "VersionRangeError",
    "PrereqsError",
    "UserError",
    "MalformedEntryError",
    "MissingFragmentError",
]
