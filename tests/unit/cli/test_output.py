"""Unit tests for CLI output formatting utilities."""

from __future__ import annotations

import json
from enum import Enum

import pytest
import yaml

from dynreqs.cli.output import (
    OutputFormat,
    format_data,
    format_error,
    format_json,
    format_yaml,
)

RESOLVED = {
    "runtime": {"requires": {"Foo": ">= 1.0, < 2.0", "Bar": "0"}},
    "test": {"requires": {"Tester": "2"}},
}

# =============================================================================
# OutputFormat Enum Tests
# =============================================================================


class TestOutputFormat:
    """Tests for OutputFormat enum."""

    def test_enum_values(self) -> None:
        assert OutputFormat.JSON.value == "json"
        assert OutputFormat.YAML.value == "yaml"

    def test_is_string_enum(self) -> None:
        """Test OutputFormat is a string enum (str, Enum)."""
        assert issubclass(OutputFormat, str)
        assert issubclass(OutputFormat, Enum)
        assert OutputFormat.YAML == "yaml"


# =============================================================================
# format_error Tests
# =============================================================================


class TestFormatError:
    """Tests for format_error()."""

    def test_message_only(self) -> None:
        assert format_error("No such command is_linux") == (
            "Error: No such command is_linux"
        )

    def test_details_and_suggestion(self) -> None:
        result = format_error(
            "No such command is_linux",
            details=["Condition: is_linux"],
            suggestion="Run 'dynreqs predicates'",
        )

        assert result.splitlines() == [
            "Error: No such command is_linux",
            "  Condition: is_linux",
            "Suggestion: Run 'dynreqs predicates'",
        ]


# =============================================================================
# Data Formatting Tests
# =============================================================================


class TestFormatData:
    """Tests for format_json(), format_yaml() and format_data()."""

    def test_json(self) -> None:
        assert json.loads(format_json(RESOLVED)) == RESOLVED

    def test_yaml_keeps_key_order(self) -> None:
        text = format_yaml(RESOLVED)

        assert yaml.safe_load(text) == RESOLVED
        assert text.index("runtime") < text.index("test")
        assert text.index("Foo") < text.index("Bar")

    @pytest.mark.parametrize("fmt", ["json", OutputFormat.JSON])
    def test_format_data_json(self, fmt: str) -> None:
        assert format_data(RESOLVED, fmt) == format_json(RESOLVED)

    def test_format_data_yaml_strips_trailing_newline(self) -> None:
        text = format_data(RESOLVED, "yaml")

        assert not text.endswith("\n")
        assert yaml.safe_load(text) == RESOLVED

    def test_format_data_unknown(self) -> None:
        with pytest.raises(ValueError):
            format_data(RESOLVED, "toml")
