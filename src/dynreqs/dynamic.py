"""Dynamic prerequisites: the entry point tying conditions and merging together.

Usage:
    from dynreqs import DynamicPrereqs

    dynamic = DynamicPrereqs(pureperl_only=False)
    spec = dynamic.parse(
        {
            "version": 1,
            "expressions": [
                {"condition": "has_perl 3.11", "prereqs": {"Bar": "1.3"}},
                {"condition": "is_os linux", "prereqs": {"Baz": "1.4"}},
                {"condition": "!is_os_type Unix", "error": "OS unsupported"},
            ],
        }
    )
    spec.as_dict()  # {"runtime": {"requires": {"Bar": "1.3", "Baz": "1.4"}}}
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from dynreqs.build_config import BuildConfig, ConfigAccessor
from dynreqs.conditions.evaluator import ConditionEvaluator
from dynreqs.conditions.parser import ConditionInput
from dynreqs.exceptions import MalformedEntryError
from dynreqs.host import HostContext, SystemHost
from dynreqs.predicates import PredicateContext, PredicateRegistry, default_registry
from dynreqs.prereqs.document import parse_document
from dynreqs.prereqs.merger import PrereqMerger
from dynreqs.prereqs.models import DynamicPrereqsDocument, ExpressionEntry
from dynreqs.prereqs.spec import PrereqSpec

__all__ = ["DynamicPrereqs"]

Expressions = (
    DynamicPrereqsDocument
    | Mapping[str, Any]
    | Iterable[ExpressionEntry | Mapping[str, Any]]
)


class DynamicPrereqs:
    """Evaluates conditional prerequisites for the current host.

    Constructed once and immutable afterwards; ``evaluate`` and ``parse``
    can be called any number of times with different inputs.

    Args:
        config: Build configuration accessor (anything with ``get(key)``).
            Defaults to BuildConfig(), backed by ``sysconfig``.
        prereqs: Seed specification that ``parse`` merges into by default.
        predicates: Registry of predicates. Defaults to the built-in set.
            ``and``/``or`` are always handled by the evaluator itself.
        pureperl_only: True for a build without native code, False for an
            explicitly compiled build, None for no preference.
        host: Host context. Defaults to SystemHost().
    """

    def __init__(
        self,
        config: ConfigAccessor | None = None,
        prereqs: PrereqSpec | Mapping[str, Any] | None = None,
        predicates: PredicateRegistry | None = None,
        pureperl_only: bool | None = None,
        host: HostContext | None = None,
    ) -> None:
        self._config = config if config is not None else BuildConfig()
        self._prereqs = PrereqSpec.from_dict(prereqs)
        self._registry = predicates if predicates is not None else default_registry
        self._pureperl_only = pureperl_only
        self._host = host if host is not None else SystemHost()

        self._evaluator = ConditionEvaluator(
            registry=self._registry,
            context=PredicateContext(
                config=self._config,
                host=self._host,
                pureperl_only=self._pureperl_only,
            ),
        )
        self._merger = PrereqMerger(self._evaluator)

    @property
    def prereqs(self) -> PrereqSpec:
        return self._prereqs

    @property
    def pureperl_only(self) -> bool | None:
        return self._pureperl_only

    @property
    def evaluator(self) -> ConditionEvaluator:
        return self._evaluator

    def evaluate(self, condition: ConditionInput) -> bool:
        """Evaluate a single condition against this host."""
        return self._evaluator.evaluate(condition)

    def parse(
        self,
        expressions: Expressions,
        prereqs: PrereqSpec | Mapping[str, Any] | None = None,
    ) -> PrereqSpec:
        """Compute the prerequisites that apply to this host.

        Args:
            expressions: A document (model or ``{"version", "expressions"}``
                mapping) or a plain list of expression entries.
            prereqs: Seed specification for this call; defaults to the one
                given at construction.

        Returns:
            The seed merged with the prereqs of every matching entry.

        Raises:
            UserError: When a matching entry carries an error message.
            MalformedEntryError: If an entry has an invalid shape.
            MissingFragmentError: If an entry sets neither prereqs nor error.
            ConditionError: If a condition cannot be evaluated.
        """
        seed = self._prereqs if prereqs is None else PrereqSpec.from_dict(prereqs)
        return self._merger.merge(self._entries(expressions), seed)

    @staticmethod
    def _entries(
        expressions: Expressions,
    ) -> Iterable[ExpressionEntry | Mapping[str, Any]]:
        if isinstance(expressions, DynamicPrereqsDocument):
            return expressions.expressions
        if isinstance(expressions, Mapping):
            if "expressions" in expressions:
                return parse_document(expressions).expressions
            raise MalformedEntryError(
                "expected a list of entries or a mapping with 'expressions'"
            )
        if isinstance(expressions, (str, bytes)):
            raise MalformedEntryError("expected a list of entries, got a string")
        return expressions
