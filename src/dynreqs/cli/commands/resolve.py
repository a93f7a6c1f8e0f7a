"""CLI command for dynreqs resolve.

Evaluates a dynamic prerequisites document on this host and prints the
merged prerequisites.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import click

from dynreqs.cli.common import build_dynamic, cli_error_handler, parse_defines
from dynreqs.cli.context import CLIContext
from dynreqs.cli.output import OutputFormat, format_data
from dynreqs.exceptions import DocumentError
from dynreqs.logging import bind_context, clear_context, get_logger
from dynreqs.prereqs import PrereqSpec, load_document, load_meta
from dynreqs.prereqs.document import read_data

logger = get_logger(__name__)


def _load_seed(path: Path) -> PrereqSpec:
    data = read_data(path)
    if data is None:
        return PrereqSpec.empty()
    if not isinstance(data, Mapping):
        raise DocumentError("seed prerequisites must be a mapping", path=path)
    return PrereqSpec.from_dict(data)


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--meta",
    is_flag=True,
    default=False,
    help="FILE is distribution metadata with 'prereqs' and "
    "'x_dynamic_prerequisites' sections.",
)
@click.option(
    "--seed",
    "seed_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File with static prerequisites to merge into.",
)
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
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice([f.value for f in OutputFormat]),
    default=None,
    help="Output format (default from settings: json).",
)
@click.pass_context
def resolve(
    ctx: click.Context,
    file: Path,
    meta: bool,
    seed_file: Path | None,
    pureperl_only: bool | None,
    defines: dict[str, str],
    use_default: bool,
    fmt: str | None,
) -> None:
    """Resolve the prerequisites that apply to this host.

    Exits 1 when a matching entry reports an error, and 3 when that error
    declares the platform unsupported.

    Examples:
        dynreqs resolve dynamic.yaml
        dynreqs resolve META.json --meta --compiled -D CC=clang
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    output_format = fmt or cli_ctx.config.output_format

    bind_context(document=str(file))
    try:
        with cli_error_handler():
            if meta:
                seed, document = load_meta(file)
            else:
                seed, document = PrereqSpec.empty(), load_document(file)
            if seed_file is not None:
                seed = seed.merged(_load_seed(seed_file))

            dynamic = build_dynamic(
                cli_ctx,
                pureperl_only=pureperl_only,
                defines=defines,
                use_default=use_default,
            )
            result = dynamic.parse(document, prereqs=seed)
            logger.info("document_resolved", phases=result.phases)
    finally:
        clear_context()

    click.echo(format_data(result.as_dict(), output_format))
