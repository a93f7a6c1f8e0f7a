"""CLI utilities for dynreqs.

This module provides CLI-specific utilities including context management,
exit codes and output formatting.
"""

from __future__ import annotations

from dynreqs.cli.context import CLIContext, ExitCode
from dynreqs.cli.output import OutputFormat

__all__ = [
    "CLIContext",
    "ExitCode",
    "OutputFormat",
]
