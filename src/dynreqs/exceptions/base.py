from __future__ import annotations


class DynreqsError(Exception):
    """Base exception class for all dynreqs-specific errors.

    This is the root of the dynreqs exception hierarchy. Every error raised
    while parsing conditions, evaluating predicates or merging prerequisites
    inherits from this class, so build tooling can catch them at a single
    boundary while letting system exceptions propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            spec = dynamic.parse(document)
        except DynreqsError as e:
            logger.error(f"dynreqs error: {e.message}")
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the DynreqsError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
