"""dynreqs - conditional prerequisites resolved against the build host.

A distribution declares its static prerequisites plus a list of expression
entries, each pairing a condition ("is_os linux", "!can_xs") with extra
prerequisites or an error message. DynamicPrereqs evaluates the entries on
the current host and merges the prerequisites of those that match.
"""

from __future__ import annotations

from dynreqs.build_config import BuildConfig
from dynreqs.dynamic import DynamicPrereqs
from dynreqs.exceptions import DynreqsError, UserError
from dynreqs.host import SystemHost
from dynreqs.predicates import PredicateRegistry, default_registry
from dynreqs.prereqs import PrereqSpec, load_document, load_meta
from dynreqs.versions import VersionRange, satisfies

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "BuildConfig",
    "DynamicPrereqs",
    "DynreqsError",
    "UserError",
    "SystemHost",
    "PredicateRegistry",
    "default_registry",
    "PrereqSpec",
    "load_document",
    "load_meta",
    "VersionRange",
    "satisfies",
]
