"""Loading dynamic prerequisite documents from JSON and YAML files."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from dynreqs.constants import META_DYNAMIC_KEY, SUPPORTED_DOCUMENT_VERSIONS
from dynreqs.exceptions import DocumentError
from dynreqs.logging import get_logger
from dynreqs.prereqs.models import DynamicPrereqsDocument
from dynreqs.prereqs.spec import PrereqSpec

__all__ = ["read_data", "parse_document", "load_document", "load_meta"]

logger = get_logger(__name__)


def read_data(path: Path) -> Any:
    """Read a JSON or YAML file.

    Files ending in ``.json`` are read as JSON; everything else as YAML
    (which also accepts JSON).

    Raises:
        DocumentError: If the file cannot be read or parsed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentError(f"cannot read file: {e}", path=path) from e

    try:
        if path.suffix == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DocumentError(f"invalid document: {e}", path=path) from e


def parse_document(
    data: Any, path: Path | None = None
) -> DynamicPrereqsDocument:
    """Validate raw data as a dynamic prerequisites document.

    Args:
        data: Either a mapping with ``version``/``expressions`` keys or a
            bare list of expression entries.
        path: Source path, for error messages.

    Raises:
        DocumentError: If the data is not a valid document or its version is
            not supported.
    """
    if isinstance(data, list):
        data = {"expressions": data}
    if not isinstance(data, Mapping):
        raise DocumentError("document must be a mapping or a list", path=path)

    try:
        document = DynamicPrereqsDocument.model_validate(dict(data))
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise DocumentError(
            f"invalid '{field}': {first_error['msg']}", path=path
        ) from e

    if document.version not in SUPPORTED_DOCUMENT_VERSIONS:
        raise DocumentError(
            f"unsupported document version {document.version}", path=path
        )
    return document


def load_document(path: Path) -> DynamicPrereqsDocument:
    """Load a dynamic prerequisites document from a file."""
    logger.debug("loading_document", path=str(path))
    return parse_document(read_data(path), path=path)


def load_meta(path: Path) -> tuple[PrereqSpec, DynamicPrereqsDocument]:
    """Load distribution metadata carrying static and dynamic prerequisites.

    The metadata's ``prereqs`` section becomes the seed specification and
    its ``x_dynamic_prerequisites`` section the document. Either may be
    missing.

    Returns:
        Tuple of (seed specification, dynamic prerequisites document).
    """
    data = read_data(path)
    if not isinstance(data, Mapping):
        raise DocumentError("metadata must be a mapping", path=path)

    seed_data = data.get("prereqs") or {}
    if not isinstance(seed_data, Mapping):
        raise DocumentError("'prereqs' must be a mapping", path=path)

    dynamic = data.get(META_DYNAMIC_KEY)
    if dynamic is None:
        logger.info("no_dynamic_prerequisites", path=str(path))
        dynamic = {}

    return PrereqSpec.from_dict(seed_data), parse_document(dynamic, path=path)
