"""Built-in predicate functions.

This module consolidates all built-in predicates into a single location.
Each predicate is registered with the global default_registry.

Predicate Catalog:
- can_xs: A native compiler builds extensions for this interpreter
- has_perl / has_python: Interpreter version satisfies a range
- has_module: A module is installed, optionally at a version
- can_run: An executable resolves on the search path
- config_enabled: A build configuration flag is true
- has_env: An environment variable is true
- is_os: The current OS identifier equals a name
- is_os_type: The current OS belongs to a family ("Unix", "Windows")
- want_pureperl: The caller asked for a build without native code
- want_compiled: The caller explicitly asked for a native build
- y_n: Ask the user a yes/no question

Lookups that cannot be resolved (missing module, unparseable installed
version, unknown OS family) answer False instead of raising.
"""

from __future__ import annotations

from dynreqs.exceptions import PredicateArgumentError
from dynreqs.host import classify_os_type, is_true
from dynreqs.logging import get_logger
from dynreqs.predicates.models import PredicateContext
from dynreqs.predicates.registry import default_registry
from dynreqs.versions import VersionRange

logger = get_logger(__name__)


# =============================================================================
# Toolchain Predicates
# =============================================================================


@default_registry.register(
    name="can_xs",
    description="A native compiler builds extensions for this interpreter",
)
def can_xs(ctx: PredicateContext) -> bool:
    return ctx.host.can_compile(ctx.config)


@default_registry.register(
    name="can_run",
    min_args=1,
    max_args=1,
    description="Named executable resolves on the search path",
)
def can_run(ctx: PredicateContext, command: str) -> bool:
    return ctx.host.which(command) is not None


# =============================================================================
# Version Predicates
# =============================================================================


def _has_interpreter(ctx: PredicateContext, version_range: str) -> bool:
    """Check the running interpreter's version against a range."""
    return VersionRange.parse(version_range).accepts(ctx.host.interpreter_version())


default_registry.register(
    name="has_perl",
    min_args=1,
    max_args=1,
    description="Interpreter version satisfies range",
)(_has_interpreter)

default_registry.register(
    name="has_python",
    min_args=1,
    max_args=1,
    description="Interpreter version satisfies range (alias of has_perl)",
)(_has_interpreter)


@default_registry.register(
    name="has_module",
    min_args=1,
    max_args=2,
    description="Named module installed, optionally at a version",
)
def has_module(
    ctx: PredicateContext, module: str, version_range: str | None = None
) -> bool:
    """Check that a module is installed.

    Without a range, or with the "any version" range, existence alone is
    enough and no version is looked at. Otherwise the installed version
    must satisfy the range.
    """
    if version_range is None:
        return ctx.host.module_exists(module)

    # Parse the range first so a malformed range fails even when absent
    wanted = VersionRange.parse(version_range)
    if wanted.is_any:
        return ctx.host.module_exists(module)
    installed = ctx.host.find_installed_version(module)
    if installed is None:
        logger.debug("module_not_installed", module=module)
        return False
    return wanted.accepts(installed)


# =============================================================================
# Configuration and Environment Predicates
# =============================================================================


@default_registry.register(
    name="config_enabled",
    min_args=1,
    max_args=1,
    description="Named build-configuration flag is true",
)
def config_enabled(ctx: PredicateContext, key: str) -> bool:
    return is_true(ctx.config.get(key))


@default_registry.register(
    name="has_env",
    min_args=1,
    max_args=1,
    description="Named environment variable is true",
)
def has_env(ctx: PredicateContext, key: str) -> bool:
    return is_true(ctx.host.getenv(key))


@default_registry.register(
    name="is_os",
    min_args=1,
    max_args=1,
    description="Current OS identifier equals name",
)
def is_os(ctx: PredicateContext, name: str) -> bool:
    return ctx.host.os_name() == name


@default_registry.register(
    name="is_os_type",
    min_args=1,
    max_args=1,
    description='Current OS classifies under type (e.g. "Unix")',
)
def is_os_type(ctx: PredicateContext, os_type: str) -> bool:
    actual = classify_os_type(ctx.host.os_name())
    if actual is None:
        logger.debug("os_type_unknown", os_name=ctx.host.os_name())
        return False
    return actual == os_type


# =============================================================================
# Build Intent Predicates
# =============================================================================


@default_registry.register(
    name="want_pureperl",
    description="Caller requested a build without native code",
)
def want_pureperl(ctx: PredicateContext) -> bool:
    return ctx.pureperl_only is True


@default_registry.register(
    name="want_compiled",
    description="Caller explicitly requested a native build",
)
def want_compiled(ctx: PredicateContext) -> bool:
    # None means no preference, which is not an explicit request
    return ctx.pureperl_only is False


# =============================================================================
# Interactive Predicates
# =============================================================================


@default_registry.register(
    name="y_n",
    min_args=2,
    max_args=2,
    description="Interactively confirm; answers the default when unattended",
)
def y_n(ctx: PredicateContext, prompt: str, default: str) -> bool:
    """Ask a yes/no question until the answer starts with y or n.

    An empty answer, end of input, or a use-defaults signal selects the
    default.
    """
    if not prompt:
        raise PredicateArgumentError(
            "y_n() called without a prompt message", predicate="y_n"
        )
    if not default or default[0].lower() not in ("y", "n"):
        raise PredicateArgumentError(
            "Invalid default value: y_n() default must be 'y' or 'n'",
            predicate="y_n",
        )

    while True:
        ctx.host.write(f"{prompt} [{default}] ")
        answer = ctx.host.read_line()
        if answer is None:
            # Unattended: echo the default in place of an answer
            ctx.host.write(f"{default}\n")
        if not answer:
            answer = default
            logger.debug("prompt_defaulted", prompt=prompt, answer=default)

        first = answer[0].lower()
        if first == "y":
            return True
        if first == "n":
            return False
        ctx.host.write("Please answer 'y' or 'n'.\n")
