from __future__ import annotations

from dynreqs.constants import UNSUPPORTED_PLATFORM_MESSAGES
from dynreqs.exceptions.base import DynreqsError


class PrereqsError(DynreqsError):
    """Base exception for expression entry and merge errors."""


class UserError(PrereqsError):
    """Raised when an entry with an ``error`` message matches the host.

    The message is the literal text from the entry. It signals that the
    build cannot proceed on this host, so callers are expected to abort the
    surrounding build rather than recover.

    Example:
        ```python
        try:
            dynamic.parse(expressions)
        except UserError as e:
            print(e.message, file=sys.stderr)
            sys.exit(3 if e.is_unsupported_platform else 1)
        ```
    """

    @property
    def is_unsupported_platform(self) -> bool:
        """Whether the message is one reserved for "cannot build here".

        Automated test infrastructure treats these messages as an
        impossibility to build rather than as a failed build.
        """
        return self.message in UNSUPPORTED_PLATFORM_MESSAGES


class MalformedEntryError(PrereqsError):
    """Raised when an expression entry has an invalid shape.

    Attributes:
        index: Position of the offending entry in the expression list.
    """

    def __init__(self, message: str, index: int | None = None) -> None:
        self.index = index
        if index is not None:
            message = f"Expression entry {index}: {message}"
        super().__init__(message)


class MissingFragmentError(MalformedEntryError):
    """Raised when an entry sets neither ``prereqs`` nor ``error``."""

    def __init__(self, index: int | None = None) -> None:
        super().__init__("entry must set one of 'prereqs' or 'error'", index=index)
