"""Version ranges for dependency requirements.

A range is a comma separated list of clauses. Each clause is either a bare
version, which means "at least this version", or a comparison operator
followed by a version:

    "1.2"                  -> >= 1.2
    ">= 1.2, < 2.0"        -> at least 1.2, below 2.0
    ">= 1.2, != 1.5"       -> at least 1.2, excluding 1.5
    "== 1.4"               -> exactly 1.4
    "0" or ""              -> any version

Versions are compared with PEP 440 semantics through the ``packaging``
library. Pre-releases are always allowed to match, since an installed
pre-release is still the version on the host.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from packaging.specifiers import InvalidSpecifier, Specifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from dynreqs.exceptions import VersionRangeError

__all__ = ["VersionRange", "satisfies", "parse_version"]

_CLAUSE_PATTERN = re.compile(r"^(>=|<=|==|!=|>|<)?\s*(\S+)$")

# Rendering order of operators in canonical range strings
_OPERATOR_ORDER = {">=": 0, ">": 0, "<=": 1, "<": 1, "!=": 2, "==": 3}


def parse_version(text: str) -> Version | None:
    """Parse a version string, returning None when it is not PEP 440.

    Args:
        text: Version text such as "1.2.3" or "v5.20.0".

    Returns:
        The parsed Version, or None if the text cannot be parsed.
    """
    try:
        return Version(str(text).strip())
    except InvalidVersion:
        return None


def _parse_clause(clause: str, text: str) -> Specifier | None:
    match = _CLAUSE_PATTERN.match(clause)
    if match is None:
        raise VersionRangeError(f"Can't parse version clause '{clause}'", range=text)

    operator = match.group(1) or ">="
    version = parse_version(match.group(2))
    if version is None:
        raise VersionRangeError(
            f"Invalid version '{match.group(2)}' in range '{text}'", range=text
        )

    # A bare zero is the conventional spelling of "any version"
    if operator == ">=" and version == Version("0"):
        return None

    try:
        return Specifier(f"{operator}{version}", prereleases=True)
    except InvalidSpecifier as e:
        raise VersionRangeError(
            f"Invalid version clause '{clause}' in range '{text}'", range=text
        ) from e


@dataclass(frozen=True)
class VersionRange:
    """An immutable set of version constraints.

    Attributes:
        specifiers: The compiled constraints; empty means any version.

    Example:
        >>> r = VersionRange.parse(">= 1.0").intersect(VersionRange.parse("< 2.0"))
        >>> r.accepts("1.5"), r.accepts("2.5")
        (True, False)
        >>> str(r)
        '>= 1.0, < 2.0'
    """

    specifiers: SpecifierSet

    @classmethod
    def any(cls) -> VersionRange:
        return cls(SpecifierSet("", prereleases=True))

    @classmethod
    def parse(cls, text: str | int | float | None) -> VersionRange:
        """Parse range text into a VersionRange.

        Args:
            text: Range text. Numbers are accepted since YAML documents often
                carry unquoted versions. None and "" mean any version.

        Returns:
            The parsed range.

        Raises:
            VersionRangeError: If a clause is malformed or its version is not
                a valid version.
        """
        if text is None:
            return cls.any()
        raw = str(text).strip()
        if not raw:
            return cls.any()

        specifiers = []
        for clause in raw.split(","):
            clause = clause.strip()
            if not clause:
                raise VersionRangeError(f"Empty clause in range '{raw}'", range=raw)
            specifier = _parse_clause(clause, raw)
            if specifier is not None:
                specifiers.append(specifier)

        version_range = cls(
            SpecifierSet(",".join(str(s) for s in specifiers), prereleases=True)
        )
        version_range._check_satisfiable(raw)
        return version_range

    def accepts(self, version: str | Version) -> bool:
        """Check whether a version lies inside this range.

        Args:
            version: Version string or parsed Version.

        Returns:
            True if the version satisfies every constraint. Versions that
            cannot be parsed are only accepted by the "any version" range.
        """
        if self.is_any:
            return True
        if not isinstance(version, Version):
            parsed = parse_version(version)
            if parsed is None:
                return False
            version = parsed
        return self.specifiers.contains(version, prereleases=True)

    def intersect(self, other: VersionRange) -> VersionRange:
        """Return the range accepting versions accepted by both ranges.

        Raises:
            VersionRangeError: If no version can satisfy both ranges.
        """
        combined = VersionRange(self.specifiers & other.specifiers)
        combined._check_satisfiable(f"{self} & {other}")
        return combined

    @property
    def is_any(self) -> bool:
        return len(self.specifiers) == 0

    def _check_satisfiable(self, text: str) -> None:
        pins = {Version(s.version) for s in self.specifiers if s.operator == "=="}
        if len(pins) > 1:
            raise VersionRangeError(
                f"Conflicting exact versions in '{text}'", range=text
            )
        if pins:
            (pin,) = pins
            if not self.specifiers.contains(pin, prereleases=True):
                raise VersionRangeError(
                    f"Exact version {pin} is excluded by '{text}'", range=text
                )
            return

        lower = [s for s in self.specifiers if s.operator in (">=", ">")]
        upper = [s for s in self.specifiers if s.operator in ("<=", "<")]
        if not lower or not upper:
            return
        low = max(lower, key=lambda s: (Version(s.version), s.operator == ">"))
        high = min(upper, key=lambda s: (Version(s.version), s.operator == "<="))
        low_version, high_version = Version(low.version), Version(high.version)
        if low_version > high_version or (
            low_version == high_version
            and (low.operator == ">" or high.operator == "<")
        ):
            raise VersionRangeError(
                f"Minimum {low_version} exceeds maximum {high_version} in '{text}'",
                range=text,
            )

    def _clauses(self) -> list[tuple[str, Version]]:
        clauses = {(s.operator, Version(s.version)) for s in self.specifiers}
        pins = [c for c in clauses if c[0] == "=="]
        if pins:
            return pins

        # Keep only the tightest lower and upper bound
        lower = [c for c in clauses if c[0] in (">=", ">")]
        upper = [c for c in clauses if c[0] in ("<=", "<")]
        kept: list[tuple[str, Version]] = []
        if lower:
            kept.append(max(lower, key=lambda c: (c[1], c[0] == ">")))
        if upper:
            kept.append(min(upper, key=lambda c: (c[1], c[0] == "<=")))
        kept.extend(sorted(c for c in clauses if c[0] == "!="))
        return sorted(kept, key=lambda c: _OPERATOR_ORDER[c[0]])

    def __str__(self) -> str:
        clauses = self._clauses()
        if not clauses:
            return "0"
        if len(clauses) == 1 and clauses[0][0] == ">=":
            return str(clauses[0][1])
        return ", ".join(f"{operator} {version}" for operator, version in clauses)


def satisfies(version: str, range: str | None) -> bool:  # noqa: A002
    """Decide whether a version satisfies a range.

    Args:
        version: The version to test (e.g. an installed module version).
        range: Range text; see the module docstring for the grammar.

    Returns:
        True if the version is inside the range.

    Raises:
        VersionRangeError: If the range text is malformed.

    Examples:
        >>> satisfies("1.5", ">= 1.0, < 2.0")
        True
        >>> satisfies("0.5", "1.0")
        False
    """
    return VersionRange.parse(range).accepts(version)
