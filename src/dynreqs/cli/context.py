"""CLI context and exit codes for dynreqs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from dynreqs.config import DynreqsConfig

__all__ = [
    "ExitCode",
    "CLIContext",
]


class ExitCode(IntEnum):
    """Standard exit codes for the dynreqs CLI.

    - 0 for success (or a condition that holds)
    - 1 for failure (or a condition that does not hold)
    - 2 for usage errors and malformed input
    - 3 when a matching entry declares the platform unsupported
    """

    SUCCESS = 0
    FAILURE = 1
    USAGE = 2
    UNSUPPORTED = 3


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Type-safe CLI context shared by subcommands.

    Attributes:
        config: Loaded dynreqs settings, after --config was applied.
    """

    config: DynreqsConfig
