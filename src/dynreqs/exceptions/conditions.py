"""Condition parsing and evaluation errors."""

from __future__ import annotations

from typing import Any

from dynreqs.exceptions.base import DynreqsError


class ConditionError(DynreqsError):
    """Base exception for errors raised while handling a condition.

    Attributes:
        message: Human-readable error message.
        condition: The condition that caused the error (if known).
    """

    def __init__(self, message: str, condition: Any = None) -> None:
        self.condition = condition
        super().__init__(message)


class UnknownCommandError(ConditionError):
    """Raised when a condition names a predicate that is not registered.

    Always fatal: it propagates out of ``and``/``or`` combinators instead
    of being treated as a false result.

    Attributes:
        name: The unknown predicate name.
    """

    def __init__(self, name: str, condition: Any = None) -> None:
        self.name = name
        super().__init__(f"No such command {name}", condition=condition)


class MalformedConditionError(ConditionError):
    """Raised when a condition cannot be parsed.

    The command token must be a bare word, optionally prefixed with ``!``.
    Empty conditions and unbalanced quotes also end up here.
    """


class PredicateArgumentError(ConditionError):
    """Raised when a predicate is called with unusable arguments.

    Covers arity mismatches as well as argument values a predicate rejects
    outright, such as a ``y_n`` default that is neither ``y`` nor ``n``.

    Attributes:
        predicate: Name of the predicate that rejected its arguments.
    """

    def __init__(
        self,
        message: str,
        predicate: str,
        condition: Any = None,
    ) -> None:
        self.predicate = predicate
        super().__init__(message, condition=condition)
