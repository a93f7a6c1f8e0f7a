"""Pydantic models for dynamic prerequisite documents.

A document holds a format version and an ordered list of expression
entries:

    version: 1
    expressions:
      - condition: has_perl 3.10
        prereqs: {tomli: "2.0"}
      - condition: ["and", ["is_os", "openbsd"], ["config_enabled", "WITH_THREAD"]]
        prereqs: {Euz: "1.7"}
        phase: test
      - condition: "!is_os_type Unix"
        error: OS unsupported
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from dynreqs.constants import DEFAULT_PHASE, DEFAULT_RELATION

__all__ = ["ExpressionEntry", "DynamicPrereqsDocument"]


class ExpressionEntry(BaseModel):
    """One conditional rule.

    Attributes:
        condition: Condition string or list form.
        prereqs: Flat ``{module: range}`` mapping, or one already nested by
            phase and relation.
        phase: Phase for a flat prereqs mapping (default "runtime").
        relation: Relation for a flat prereqs mapping (default "requires").
        error: Message to abort with when the condition holds.

    Exactly one of prereqs and error must be set; the merger checks this
    before evaluating anything.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    condition: str | list[Any]
    prereqs: dict[str, Any] | None = None
    phase: str = DEFAULT_PHASE
    relation: str = DEFAULT_RELATION
    error: str | None = None

    @field_validator("phase", "relation", mode="before")
    @classmethod
    def default_when_empty(cls, v: Any, info: ValidationInfo) -> Any:
        """Treat null or empty phase/relation as the default."""
        if v is None or v == "":
            return DEFAULT_PHASE if info.field_name == "phase" else DEFAULT_RELATION
        return v

    @property
    def has_fragment(self) -> bool:
        return self.prereqs is not None

    @property
    def has_error(self) -> bool:
        return bool(self.error)


class DynamicPrereqsDocument(BaseModel):
    """A versioned list of expression entries."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    version: int = 1
    expressions: list[ExpressionEntry] = Field(default_factory=list)
