from __future__ import annotations

from pathlib import Path
from typing import Any

from dynreqs.exceptions.base import DynreqsError


class ConfigError(DynreqsError):
    """Exception for configuration loading, parsing, and validation errors.

    Raised when settings cannot be loaded, parsed, or validated. This includes
    YAML parsing failures, Pydantic validation errors, and invalid environment
    variable values.

    Attributes:
        message: Human-readable error message describing the configuration issue.
        field: Optional field name that caused the error (e.g., "pureperl_only").
        value: Optional value that failed validation (for debugging).

    Examples:
        ```python
        # YAML parsing failure
        raise ConfigError(
            "Failed to parse dynreqs.yaml: invalid YAML syntax at line 10"
        )

        # Pydantic validation failure
        raise ConfigError(
            "Invalid configuration value",
            field="output_format",
            value="toml",
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize the ConfigError.

        Args:
            message: Human-readable error message.
            field: Optional field name that caused the error.
            value: Optional value that failed validation.
        """
        self.field = field
        self.value = value
        super().__init__(message)


class DocumentError(DynreqsError):
    """Raised when a dynamic prerequisites document cannot be loaded.

    Attributes:
        path: The document path, when the document came from a file.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class VersionRangeError(DynreqsError):
    """Raised for malformed or unsatisfiable version ranges.

    Attributes:
        range: The offending range text.
    """

    def __init__(self, message: str, range: str | None = None) -> None:  # noqa: A002
        self.range = range
        super().__init__(message)
