"""Conditional prerequisites and their merged dependency specification.

Components:
- spec: PrereqSpec - immutable phase/relation/module/range aggregate
- models: ExpressionEntry, DynamicPrereqsDocument pydantic models
- merger: PrereqMerger - folds matching entries into a seed spec
- document: load_document/load_meta - JSON and YAML loading
"""

from __future__ import annotations

from dynreqs.prereqs.document import load_document, load_meta, parse_document
from dynreqs.prereqs.merger import PrereqMerger, coerce_entries
from dynreqs.prereqs.models import DynamicPrereqsDocument, ExpressionEntry
from dynreqs.prereqs.spec import PrereqSpec, is_nested_fragment

__all__ = [
    # Models
    "PrereqSpec",
    "ExpressionEntry",
    "DynamicPrereqsDocument",
    "is_nested_fragment",
    # Merger
    "PrereqMerger",
    "coerce_entries",
    # Documents
    "load_document",
    "load_meta",
    "parse_document",
]
