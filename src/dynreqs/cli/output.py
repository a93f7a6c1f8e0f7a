"""Output formatting utilities for the dynreqs CLI."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

import yaml

__all__ = [
    "OutputFormat",
    "format_error",
    "format_json",
    "format_yaml",
    "format_data",
]


class OutputFormat(str, Enum):
    """Supported output formats for resolved prerequisites.

    Values:
        JSON: Machine-readable JSON output (default).
        YAML: YAML output, matching the layout of distribution metadata.
    """

    JSON = "json"
    YAML = "yaml"


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Args:
        message: Primary error message.
        details: Optional list of detail lines to include.
        suggestion: Optional suggestion for resolving the error.

    Returns:
        Formatted error string with details and suggestion if provided.

    Example:
        >>> print(format_error("No such command is_linux", suggestion="Run 'dynreqs predicates'"))
        Error: No such command is_linux
        Suggestion: Run 'dynreqs predicates'
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)


def format_json(data: Any) -> str:
    """Format data as indented JSON.

    Example:
        >>> format_json({"runtime": {}})
        '{\\n  "runtime": {}\\n}'
    """
    return json.dumps(data, indent=2)


def format_yaml(data: Any) -> str:
    """Format data as block-style YAML, preserving key order."""
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def format_data(data: Any, fmt: OutputFormat | str) -> str:
    """Format data in the requested output format."""
    if OutputFormat(fmt) is OutputFormat.YAML:
        return format_yaml(data).rstrip("\n")
    return format_json(data)
