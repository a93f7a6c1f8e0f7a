"""Read access to the interpreter's build configuration.

``config_enabled`` and ``can_xs`` consult a configuration accessor: any
object with a ``get(key)`` method. BuildConfig is the default one. It
answers from explicit overrides first and falls back to the values the
interpreter was built with (``sysconfig.get_config_var``).
"""

from __future__ import annotations

import sysconfig
from collections.abc import Mapping
from typing import Any, Protocol

__all__ = ["ConfigAccessor", "BuildConfig"]


class ConfigAccessor(Protocol):
    """Protocol for build configuration accessors."""

    def get(self, key: str) -> Any:
        """Return the configuration value for key, or None if unset."""
        ...


class BuildConfig:
    """Build configuration backed by ``sysconfig`` with optional overrides.

    Example:
        >>> config = BuildConfig({"Py_GIL_DISABLED": "1"})
        >>> config.get("Py_GIL_DISABLED")
        '1'
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values = dict(values or {})

    def get(self, key: str) -> Any:
        if key in self._values:
            return self._values[key]
        return sysconfig.get_config_var(key)

    def with_values(self, **values: Any) -> BuildConfig:
        """Return a new BuildConfig with additional overrides."""
        return BuildConfig({**self._values, **values})

    @property
    def overrides(self) -> dict[str, Any]:
        return dict(self._values)

    def __repr__(self) -> str:
        return f"BuildConfig({self._values!r})"
