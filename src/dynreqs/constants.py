"""dynreqs constants.

Single source of truth for the phase and relation vocabulary of dependency
specifications, the reserved error messages and the environment variables
dynreqs reads.
"""

from __future__ import annotations

# =============================================================================
# Dependency Specification Vocabulary
# =============================================================================

#: Phase used when an expression entry does not name one
DEFAULT_PHASE: str = "runtime"

#: Relation used when an expression entry does not name one
DEFAULT_RELATION: str = "requires"

#: Phases recognised by distribution metadata
KNOWN_PHASES: frozenset[str] = frozenset(
    {"configure", "build", "test", "runtime", "develop"}
)

#: Relations recognised by distribution metadata
KNOWN_RELATIONS: frozenset[str] = frozenset(
    {"requires", "recommends", "suggests", "conflicts"}
)

#: Key under which distribution metadata carries dynamic prerequisites
META_DYNAMIC_KEY: str = "x_dynamic_prerequisites"

#: Dynamic prerequisites document versions this package understands
SUPPORTED_DOCUMENT_VERSIONS: frozenset[int] = frozenset({1})

# =============================================================================
# Conditions
# =============================================================================

#: Combinator names handled by the evaluator itself, never by a registry
RESERVED_COMMANDS: frozenset[str] = frozenset({"and", "or"})

# =============================================================================
# Errors
# =============================================================================

#: Error messages that automated testers read as "cannot build on this
#: platform" rather than "build failed". Must stay verbatim.
UNSUPPORTED_PLATFORM_MESSAGES: tuple[str, ...] = ("No support for OS", "OS unsupported")

# =============================================================================
# Environment
# =============================================================================

#: Environment variables that make interactive prompts take their default
USE_DEFAULT_ENV_VARS: tuple[str, ...] = ("DYNREQS_USE_DEFAULT", "PERL_MM_USE_DEFAULT")
