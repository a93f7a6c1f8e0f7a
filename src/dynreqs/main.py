"""CLI entry point for dynreqs.

This module defines the Click-based command-line interface for dynreqs.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from dynreqs.logging import configure_logging

# Load environment variables from .env file in current directory.
# This must happen before has_env and the settings read the environment.
load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

from dynreqs import __version__  # noqa: E402
from dynreqs.cli.commands.check import check  # noqa: E402
from dynreqs.cli.commands.predicates import predicates  # noqa: E402
from dynreqs.cli.commands.resolve import resolve  # noqa: E402
from dynreqs.cli.context import CLIContext, ExitCode  # noqa: E402
from dynreqs.config import load_config  # noqa: E402
from dynreqs.exceptions import ConfigError  # noqa: E402

_VERBOSITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="dynreqs")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=str),
    default=None,
    help="Path to config file (overrides ./dynreqs.yaml).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress non-essential output (ERROR level only).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str | None,
    verbose: int,
    quiet: bool,
) -> None:
    """dynreqs - conditional prerequisites resolved against this host."""
    ctx.ensure_object(dict)

    # Load configuration first (before logging setup)
    config_path = Path(config_file) if config_file else None
    try:
        config = load_config(config_path)
    except ConfigError as e:
        # Can't use logging yet, just output error
        error_parts = [f"Error: {e.message}"]
        if e.field:
            error_parts.append(f"  Field: {e.field}")
        if e.value is not None:
            error_parts.append(f"  Value: {e.value}")
        click.echo("\n".join(error_parts), err=True)
        ctx.exit(ExitCode.FAILURE)

    ctx.obj["cli_ctx"] = CLIContext(config=config)

    # Priority: quiet > verbose > config
    if quiet:
        level = logging.ERROR
    elif verbose > 0:
        level = logging.INFO if verbose == 1 else logging.DEBUG
    else:
        level = _VERBOSITY_LEVELS.get(config.verbosity, logging.WARNING)

    configure_logging(level=level)

    # If no command is given, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(resolve)
cli.add_command(check)
cli.add_command(predicates)

if __name__ == "__main__":
    cli()
