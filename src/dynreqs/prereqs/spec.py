"""Dependency specifications: phase -> relation -> module -> version range.

PrereqSpec is immutable. Merging builds a new spec; when the same module
appears under the same phase and relation in both specs, the merged range
is the intersection of the two ranges, stored in canonical form. Ranges
that are never merged keep the spelling they were given.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from dynreqs.constants import (
    DEFAULT_PHASE,
    DEFAULT_RELATION,
    KNOWN_PHASES,
    KNOWN_RELATIONS,
)
from dynreqs.exceptions import MalformedEntryError, VersionRangeError
from dynreqs.logging import get_logger
from dynreqs.versions import VersionRange

__all__ = ["PrereqSpec", "is_nested_fragment"]

logger = get_logger(__name__)

_Requirements = dict[str, dict[str, dict[str, str]]]


def _is_version_value(value: object) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def is_nested_fragment(prereqs: Mapping[str, Any]) -> bool:
    """Decide whether a prereqs fragment is already phase/relation nested.

    A fragment is nested when every value is a mapping and flat when every
    value is a version. Empty fragments count as flat.

    Raises:
        MalformedEntryError: If the fragment mixes both shapes or holds values
            that are neither.
    """
    values = list(prereqs.values())
    if all(_is_version_value(v) for v in values):
        return False
    if all(isinstance(v, Mapping) for v in values):
        return True
    raise MalformedEntryError(
        "prereqs must map modules to versions, or phases to relations to "
        "modules to versions"
    )


class PrereqSpec:
    """An immutable aggregate of requirements keyed by phase and relation.

    Example:
        >>> spec = PrereqSpec.from_dict({"runtime": {"requires": {"Foo": "1.0"}}})
        >>> merged = spec.merged(PrereqSpec.from_fragment({"Foo": "< 2.0"}))
        >>> merged.requirements_for("runtime", "requires")
        {'Foo': '>= 1.0, < 2.0'}
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Mapping[str, Mapping[str, Any]]] | None = None):
        normalized: _Requirements = {}
        for phase, relations in (data or {}).items():
            if not isinstance(relations, Mapping):
                raise MalformedEntryError(f"phase '{phase}' must map relations")
            for relation, modules in relations.items():
                if not isinstance(modules, Mapping):
                    raise MalformedEntryError(
                        f"relation '{phase}.{relation}' must map modules to versions"
                    )
                target = normalized.setdefault(str(phase), {}).setdefault(
                    str(relation), {}
                )
                for module, version in modules.items():
                    if version is not None and not _is_version_value(version):
                        raise MalformedEntryError(
                            f"version for '{module}' must be a string, "
                            f"got {version!r}"
                        )
                    # Validate now, keep the caller's spelling
                    VersionRange.parse(version)
                    target[str(module)] = "0" if version is None else str(version).strip()
        self._data = normalized

    @classmethod
    def empty(cls) -> PrereqSpec:
        return cls()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | PrereqSpec | None) -> PrereqSpec:
        if isinstance(data, PrereqSpec):
            return data
        return cls(data)

    @classmethod
    def from_fragment(
        cls,
        prereqs: Mapping[str, Any],
        phase: str = DEFAULT_PHASE,
        relation: str = DEFAULT_RELATION,
    ) -> PrereqSpec:
        """Build a spec from an entry's prereqs fragment.

        Args:
            prereqs: Either a flat ``{module: range}`` mapping or a nested
                ``{phase: {relation: {module: range}}}`` mapping.
            phase: Phase for a flat fragment.
            relation: Relation for a flat fragment.

        Returns:
            The fragment as a spec. Nested fragments ignore phase/relation.
        """
        if is_nested_fragment(prereqs):
            spec = cls(prereqs)
        else:
            spec = cls({phase: {relation: prereqs}})
        spec._warn_unknown_keys()
        return spec

    def _warn_unknown_keys(self) -> None:
        for phase, relations in self._data.items():
            if phase not in KNOWN_PHASES:
                logger.warning("unknown_phase", phase=phase)
            for relation in relations:
                if relation not in KNOWN_RELATIONS:
                    logger.warning("unknown_relation", phase=phase, relation=relation)

    def merged(self, *others: PrereqSpec) -> PrereqSpec:
        """Return a new spec combining this spec with others, in order.

        Raises:
            VersionRangeError: If two ranges for the same module cannot both
                be satisfied.
        """
        data = self.as_dict()
        for other in others:
            for phase, relation, module, version in other.items():
                target = data.setdefault(phase, {}).setdefault(relation, {})
                if module in target:
                    try:
                        combined = VersionRange.parse(target[module]).intersect(
                            VersionRange.parse(version)
                        )
                    except VersionRangeError as e:
                        raise VersionRangeError(
                            f"Conflicting requirements for {module} "
                            f"({phase}.{relation}): {e.message}",
                            range=e.range,
                        ) from e
                    target[module] = str(combined)
                else:
                    target[module] = version
        return PrereqSpec(data)

    def requirements_for(self, phase: str, relation: str) -> dict[str, str]:
        """Return a copy of the module -> range mapping for one phase/relation."""
        return dict(self._data.get(phase, {}).get(relation, {}))

    def items(self) -> Iterator[tuple[str, str, str, str]]:
        """Iterate (phase, relation, module, range) tuples."""
        for phase, relations in self._data.items():
            for relation, modules in relations.items():
                for module, version in modules.items():
                    yield phase, relation, module, version

    @property
    def phases(self) -> list[str]:
        return list(self._data)

    def is_empty(self) -> bool:
        return not any(True for _ in self.items())

    def as_dict(self) -> _Requirements:
        """Return the requirements as plain nested dicts (a deep copy)."""
        return {
            phase: {relation: dict(modules) for relation, modules in relations.items()}
            for phase, relations in self._data.items()
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrereqSpec):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.items())))

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __repr__(self) -> str:
        return f"PrereqSpec({self._data!r})"
