"""Condition parsing and evaluation.

A condition names a predicate and its arguments, optionally negated with
``!``, or combines sub-conditions with ``and``/``or``:

    is_os linux
    !is_os_type Unix
    has_module "packaging" ">= 20, < 25"
    and "is_os openbsd" "config_enabled Py_GIL_DISABLED"
    ["or", ["can_run", "cc"], ["can_run", "gcc"]]

Module Structure
----------------
- parser.py: Command/Combinator tree and parse_condition()
- evaluator.py: ConditionEvaluator, evaluating trees against predicates
"""

from __future__ import annotations

from dynreqs.conditions.evaluator import ConditionEvaluator
from dynreqs.conditions.parser import (
    Combinator,
    Command,
    Condition,
    ConditionInput,
    parse_condition,
    tokenize,
)

__all__ = [
    "Command",
    "Combinator",
    "Condition",
    "ConditionInput",
    "ConditionEvaluator",
    "parse_condition",
    "tokenize",
]
