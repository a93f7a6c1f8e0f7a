from __future__ import annotations

import click

from dynreqs.cli.common import build_dynamic, cli_error_handler, parse_defines
from dynreqs.cli.context import CLIContext, ExitCode
from dynreqs.conditions import ConditionInput


def _condition_from_words(words: tuple[str, ...]) -> ConditionInput:
    # One argument is a condition string; several are the list form
    if len(words) == 1:
        return words[0]
    return list(words)


@click.command()
@click.argument("condition", nargs=-1, required=True)
@click.option(
    "--pure-only/--compiled",
    "pureperl_only",
    default=None,
    help="Request a build without native code, or an explicitly compiled one.",
)
@click.option(
    "-D",
    "--define",
    "defines",
    multiple=True,
    callback=parse_defines,
    metavar="KEY=VALUE",
    help="Override a build configuration value (repeatable).",
)
@click.option(
    "--use-default",
    is_flag=True,
    default=False,
    help="Answer interactive prompts with their defaults.",
)
@click.pass_context
def check(
    ctx: click.Context,
    condition: tuple[str, ...],
    pureperl_only: bool | None,
    defines: dict[str, str],
    use_default: bool,
) -> None:
    """Evaluate a single condition on this host.

    Prints "true" or "false" and exits 0 or 1 accordingly.

    Examples:
        dynreqs check 'is_os_type Unix'
        dynreqs check or 'is_os linux' 'is_os darwin'
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]

    with cli_error_handler():
        dynamic = build_dynamic(
            cli_ctx,
            pureperl_only=pureperl_only,
            defines=defines,
            use_default=use_default,
        )
        result = dynamic.evaluate(_condition_from_words(condition))

    click.echo("true" if result else "false")
    ctx.exit(ExitCode.SUCCESS if result else ExitCode.FAILURE)
