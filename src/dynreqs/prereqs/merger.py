"""Prerequisite merger that folds matching entries into a dependency spec.

This module provides PrereqMerger which:
1. Validates every entry up front (shape, exactly one of prereqs/error)
2. Evaluates entry conditions in list order
3. Aborts with the entry's message when a matching entry carries an error
4. Folds the prereqs of matching entries into the seed specification
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from dynreqs.conditions.evaluator import ConditionEvaluator
from dynreqs.exceptions import (
    MalformedEntryError,
    MissingFragmentError,
    UserError,
)
from dynreqs.logging import get_logger
from dynreqs.prereqs.models import ExpressionEntry
from dynreqs.prereqs.spec import PrereqSpec

__all__ = ["PrereqMerger", "coerce_entries"]

logger = get_logger(__name__)


def _coerce_entry(
    entry: ExpressionEntry | Mapping[str, Any], index: int
) -> ExpressionEntry:
    if isinstance(entry, ExpressionEntry):
        parsed = entry
    elif isinstance(entry, Mapping):
        try:
            parsed = ExpressionEntry.model_validate(dict(entry))
        except ValidationError as e:
            first_error = e.errors()[0]
            field = ".".join(str(loc) for loc in first_error["loc"])
            raise MalformedEntryError(
                f"invalid '{field}': {first_error['msg']}", index=index
            ) from e
    else:
        raise MalformedEntryError(
            f"entry must be a mapping, got {type(entry).__name__}", index=index
        )

    if parsed.has_fragment and parsed.has_error:
        raise MalformedEntryError(
            "entry must set only one of 'prereqs' or 'error'", index=index
        )
    if not parsed.has_fragment and not parsed.has_error:
        raise MissingFragmentError(index=index)
    return parsed


def coerce_entries(
    entries: Iterable[ExpressionEntry | Mapping[str, Any]],
) -> list[ExpressionEntry]:
    """Validate and convert raw entries into ExpressionEntry models.

    Raises:
        MalformedEntryError: If an entry has an invalid shape.
        MissingFragmentError: If an entry sets neither prereqs nor error.
    """
    return [_coerce_entry(entry, index) for index, entry in enumerate(entries)]


class PrereqMerger:
    """Applies expression entries to a seed dependency specification.

    Example:
        ```python
        merger = PrereqMerger(evaluator)
        spec = merger.merge(
            [
                {"condition": "is_os linux", "prereqs": {"Baz": "1.4"}},
                {"condition": "!is_os_type Unix", "error": "OS unsupported"},
            ]
        )
        spec.requirements_for("runtime", "requires")  # {"Baz": "1.4"} on Linux
        ```
    """

    def __init__(self, evaluator: ConditionEvaluator) -> None:
        self._evaluator = evaluator

    def merge(
        self,
        entries: Iterable[ExpressionEntry | Mapping[str, Any]],
        seed: PrereqSpec | Mapping[str, Any] | None = None,
    ) -> PrereqSpec:
        """Evaluate entries and merge the prereqs of those that match.

        Args:
            entries: Expression entries, as models or plain mappings.
            seed: Specification to merge into (default: empty).

        Returns:
            The seed merged with every matching fragment, in entry order.
            The seed itself when nothing matches.

        Raises:
            UserError: When a matching entry carries an error message. Later
                entries are not evaluated.
            MalformedEntryError: If an entry has an invalid shape.
            MissingFragmentError: If an entry sets neither prereqs nor error.
            ConditionError: If a condition is malformed or names an unknown
                predicate.
        """
        base = PrereqSpec.from_dict(seed)
        validated = coerce_entries(entries)

        fragments: list[PrereqSpec] = []
        for index, entry in enumerate(validated):
            if not self._evaluator.evaluate(entry.condition):
                logger.debug("entry_skipped", entry_index=index)
                continue

            if entry.has_error:
                logger.info("entry_error", entry_index=index, error=entry.error)
                raise UserError(str(entry.error))

            try:
                fragment = PrereqSpec.from_fragment(
                    entry.prereqs or {}, phase=entry.phase, relation=entry.relation
                )
            except MalformedEntryError as e:
                raise MalformedEntryError(e.message, index=index) from e
            logger.info(
                "entry_matched",
                entry_index=index,
                phase=entry.phase,
                relation=entry.relation,
                modules=sorted(module for _, _, module, _ in fragment.items()),
            )
            fragments.append(fragment)

        if not fragments:
            return base
        return base.merged(*fragments)
