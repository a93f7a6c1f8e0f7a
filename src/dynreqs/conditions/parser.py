"""Condition parser models and functions.

A condition is a command name followed by arguments. It arrives either as
a shell-like string or as a list of strings:

- "is_os linux"                         -> predicate with one argument
- "!is_os_type Unix"                    -> negated predicate
- 'has_module "Foo::Bar" "1.2"'         -> quoted arguments
- ["has_module", "Foo::Bar", "1.2"]     -> list form, used as is
- 'and "is_os linux" "can_xs"'          -> combinator over sub-conditions
- ["or", ["is_os", "linux"], "can_xs"]  -> operands may be lists or strings

The command token must match ``!?\\w+``. A lone ``!`` token also negates
the command that follows it. ``and``/``or`` treat every argument as a full
sub-condition instead of a scalar argument.

Both input forms are converted once into an immutable tree of Command and
Combinator nodes which the evaluator walks.
"""

from __future__ import annotations

import re
import shlex
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from dynreqs.constants import RESERVED_COMMANDS
from dynreqs.exceptions import MalformedConditionError

__all__ = [
    "Command",
    "Combinator",
    "Condition",
    "ConditionInput",
    "tokenize",
    "parse_condition",
]

_COMMAND_PATTERN = re.compile(r"^(!?)(\w+)$")


@dataclass(frozen=True, slots=True)
class Command:
    """A predicate invocation.

    Attributes:
        name: Predicate name (without any ``!`` prefix).
        args: Arguments passed to the predicate, already unquoted.
        negated: True if the result is inverted.

    Examples:
        >>> parse_condition("!is_os MSWin32")
        Command(name='is_os', args=('MSWin32',), negated=True)
    """

    name: str
    args: tuple[str, ...] = ()
    negated: bool = False

    def __str__(self) -> str:
        words = [("!" if self.negated else "") + self.name, *self.args]
        return shlex.join(words)


@dataclass(frozen=True, slots=True)
class Combinator:
    """An ``and``/``or`` over sub-conditions.

    Attributes:
        kind: "and" or "or".
        operands: Parsed sub-conditions, in evaluation order.
        negated: True if the combined result is inverted.
    """

    kind: Literal["and", "or"]
    operands: tuple[Condition, ...] = ()
    negated: bool = False

    def __str__(self) -> str:
        words = [("!" if self.negated else "") + self.kind]
        words.extend(str(operand) for operand in self.operands)
        return shlex.join(words)


Condition = Command | Combinator

# Anything parse_condition accepts
ConditionInput = str | Sequence[object] | Command | Combinator


def tokenize(condition: str) -> list[str]:
    """Split a condition string into words using shell quoting rules.

    Args:
        condition: Condition text such as 'and "is_os linux" can_xs'.

    Returns:
        List of words with quotes removed.

    Raises:
        MalformedConditionError: If quotes are unbalanced.

    Examples:
        >>> tokenize('has_module "Foo Bar" 1.2')
        ['has_module', 'Foo Bar', '1.2']
    """
    try:
        return shlex.split(condition)
    except ValueError as e:
        raise MalformedConditionError(
            f"Can't parse dynamic prerequisite '{condition}': {e}",
            condition=condition,
        ) from e


def _words(condition: str | Sequence[object]) -> list[object]:
    if isinstance(condition, str):
        return list(tokenize(condition))
    return list(condition)


def parse_condition(condition: ConditionInput) -> Condition:
    """Parse a condition into a Command or Combinator tree.

    Args:
        condition: Condition string, list form, or an already parsed node
            (returned unchanged).

    Returns:
        The parsed condition.

    Raises:
        MalformedConditionError: For empty conditions, command tokens that
            are not a bare word with optional ``!`` prefix, or non-string
            predicate arguments.

    Examples:
        >>> parse_condition(["and", ["is_os", "linux"], "can_xs"])  # doctest: +ELLIPSIS
        Combinator(kind='and', operands=(Command(...), Command(...)), negated=False)
    """
    if isinstance(condition, (Command, Combinator)):
        return condition
    if not isinstance(condition, (str, Sequence)):
        raise MalformedConditionError(
            f"Condition must be a string or a list, got {type(condition).__name__}",
            condition=condition,
        )

    words = _words(condition)
    if not words:
        raise MalformedConditionError("Empty condition", condition=condition)

    negated = False
    head = words[0]
    # A lone "!" negates the command that follows it
    if head == "!" and len(words) > 1:
        negated = True
        words = words[1:]
        head = words[0]

    if not isinstance(head, str):
        raise MalformedConditionError(
            f"Can't parse dynamic prerequisite '{head!r}': command must be a word",
            condition=condition,
        )
    match = _COMMAND_PATTERN.match(head)
    if match is None:
        raise MalformedConditionError(
            f"Can't parse dynamic prerequisite '{head}'", condition=condition
        )

    bang, name = match.groups()
    negated = negated != bool(bang)
    rest = words[1:]

    if name in RESERVED_COMMANDS:
        operands = tuple(_parse_operand(operand, condition) for operand in rest)
        return Combinator(kind=name, operands=operands, negated=negated)  # type: ignore[arg-type]

    args: list[str] = []
    for arg in rest:
        if isinstance(arg, bool) or not isinstance(arg, (str, int, float)):
            raise MalformedConditionError(
                f"Argument {arg!r} to '{name}' must be a string",
                condition=condition,
            )
        args.append(str(arg))
    return Command(name=name, args=tuple(args), negated=negated)


def _parse_operand(operand: object, parent: object) -> Condition:
    if isinstance(operand, (str, Sequence)) and not isinstance(operand, bytes):
        return parse_condition(operand)
    raise MalformedConditionError(
        f"Operand {operand!r} is not a condition", condition=parent
    )
