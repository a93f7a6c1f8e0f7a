from __future__ import annotations

import contextlib
from collections.abc import Generator

import click

from dynreqs.build_config import BuildConfig
from dynreqs.cli.context import CLIContext, ExitCode
from dynreqs.cli.output import format_error
from dynreqs.dynamic import DynamicPrereqs
from dynreqs.exceptions import (
    ConditionError,
    DynreqsError,
    PredicateArgumentError,
    UnknownCommandError,
    UserError,
)
from dynreqs.host import SystemHost
from dynreqs.logging import get_logger


@contextlib.contextmanager
def cli_error_handler() -> Generator[None, None, None]:
    """Context manager for common CLI error handling.

    - KeyboardInterrupt: exit with FAILURE
    - UserError: print the entry's message, exit with UNSUPPORTED for the
      reserved unsupported-platform messages and FAILURE otherwise
    - Other DynreqsError (malformed conditions, entries, documents, ranges):
      exit with USAGE

    Example:
        >>> with cli_error_handler():
        >>>     spec = dynamic.parse(document)
    """
    logger = get_logger(__name__)

    try:
        yield
    except KeyboardInterrupt:
        click.echo("\n\nInterrupted by user.", err=True)
        raise SystemExit(ExitCode.FAILURE) from None
    except UserError as e:
        click.echo(format_error(e.message), err=True)
        if e.is_unsupported_platform:
            raise SystemExit(ExitCode.UNSUPPORTED) from e
        raise SystemExit(ExitCode.FAILURE) from e
    except UnknownCommandError as e:
        error_msg = format_error(
            e.message, suggestion="Run 'dynreqs predicates' to list predicates"
        )
        click.echo(error_msg, err=True)
        raise SystemExit(ExitCode.USAGE) from e
    except ConditionError as e:
        details = [f"Condition: {e.condition}"] if e.condition else []
        if isinstance(e, PredicateArgumentError):
            details.append(f"Predicate: {e.predicate}")
        click.echo(format_error(e.message, details=details or None), err=True)
        raise SystemExit(ExitCode.USAGE) from e
    except DynreqsError as e:
        logger.debug("command_failed", error_type=type(e).__name__)
        click.echo(format_error(e.message), err=True)
        raise SystemExit(ExitCode.USAGE) from e


def parse_defines(
    ctx: click.Context, param: click.Parameter, value: tuple[str, ...]
) -> dict[str, str]:
    """Click callback turning repeated ``-D KEY=VALUE`` options into a dict."""
    defines: dict[str, str] = {}
    for item in value:
        key, sep, val = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}")
        defines[key] = val
    return defines


def build_dynamic(
    cli_ctx: CLIContext,
    *,
    pureperl_only: bool | None = None,
    defines: dict[str, str] | None = None,
    use_default: bool = False,
) -> DynamicPrereqs:
    """Create a DynamicPrereqs from settings and command-line overrides.

    Command-line values take precedence over the loaded settings.
    """
    config = cli_ctx.config
    if pureperl_only is None:
        pureperl_only = config.pureperl_only

    return DynamicPrereqs(
        config=BuildConfig({**config.build_config, **(defines or {})}),
        pureperl_only=pureperl_only,
        host=SystemHost(use_default=use_default or config.use_default),
    )
