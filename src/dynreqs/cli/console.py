"""Shared Rich Console for dynreqs CLI output.

Styled output in terminals, plain text when piped.
"""

from __future__ import annotations

from rich.console import Console

__all__ = ["console"]

console = Console()
