"""Condition evaluator.

This module provides the ConditionEvaluator class for evaluating parsed
conditions against a predicate registry and a predicate context.

Evaluation:
- Command: look up the predicate, check its arity, call it, apply negation
- and: true unless an operand is false; stops at the first false operand
- or: false unless an operand is true; stops at the first true operand
- and with no operands is true, or with no operands is false

Errors raised by a sub-condition (unknown command, malformed condition,
bad predicate arguments) propagate out of combinators unchanged.
"""

from __future__ import annotations

from dynreqs.conditions.parser import (
    Combinator,
    Command,
    Condition,
    ConditionInput,
    parse_condition,
)
from dynreqs.exceptions import PredicateArgumentError
from dynreqs.logging import get_logger
from dynreqs.predicates.models import PredicateContext
from dynreqs.predicates.registry import PredicateRegistry

__all__ = ["ConditionEvaluator"]

logger = get_logger(__name__)


class ConditionEvaluator:
    """Evaluates conditions to booleans.

    The evaluator holds no state besides its registry and context, and it
    caches nothing: every call re-runs the predicates involved.

    Example:
        ```python
        evaluator = ConditionEvaluator(
            registry=default_registry,
            context=PredicateContext(config=BuildConfig(), host=SystemHost()),
        )

        evaluator.evaluate("is_os_type Unix")
        evaluator.evaluate(["and", ["has_module", "packaging", "20"], "can_xs"])
        ```
    """

    def __init__(
        self,
        registry: PredicateRegistry,
        context: PredicateContext,
    ) -> None:
        self._registry = registry
        self._context = context

    @property
    def registry(self) -> PredicateRegistry:
        return self._registry

    @property
    def context(self) -> PredicateContext:
        return self._context

    def evaluate(self, condition: ConditionInput) -> bool:
        """Evaluate a condition.

        Args:
            condition: Condition string, list form, or parsed node.

        Returns:
            The boolean outcome.

        Raises:
            MalformedConditionError: If the condition cannot be parsed.
            UnknownCommandError: If a command names no registered predicate.
            PredicateArgumentError: If a predicate gets the wrong number of
                arguments or rejects their values.
        """
        parsed = parse_condition(condition)
        result = self._evaluate(parsed)
        logger.debug("condition_evaluated", condition=str(parsed), result=result)
        return result

    def _evaluate(self, condition: Condition) -> bool:
        if isinstance(condition, Combinator):
            result = self._evaluate_combinator(condition)
        else:
            result = self._evaluate_command(condition)
        return not result if condition.negated else result

    def _evaluate_combinator(self, combinator: Combinator) -> bool:
        if combinator.kind == "and":
            return all(self._evaluate(operand) for operand in combinator.operands)
        return any(self._evaluate(operand) for operand in combinator.operands)

    def _evaluate_command(self, command: Command) -> bool:
        predicate = self._registry.get(command.name)
        if not predicate.accepts_arity(len(command.args)):
            raise PredicateArgumentError(
                f"{command.name} takes {predicate.arity} argument(s), "
                f"got {len(command.args)}",
                predicate=command.name,
                condition=str(command),
            )
        return predicate(self._context, *command.args)
