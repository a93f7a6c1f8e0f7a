from __future__ import annotations

import click
from rich.table import Table

from dynreqs.cli.console import console
from dynreqs.cli.output import format_json
from dynreqs.predicates import default_registry

_TABLE_HEADERS = ["Name", "Arguments", "Description"]


@click.command()
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Output as JSON.",
)
def predicates(as_json: bool) -> None:
    """List the predicates available in conditions.

    Examples:
        dynreqs predicates
        dynreqs predicates --json
    """
    entries = default_registry.list_all()

    if as_json:
        click.echo(
            format_json(
                [
                    {
                        "name": predicate.name,
                        "arity": predicate.arity,
                        "description": predicate.description,
                    }
                    for predicate in entries
                ]
            )
        )
        return

    table = Table(title="Predicates", show_lines=False)
    for header in _TABLE_HEADERS:
        table.add_column(header)
    for predicate in entries:
        table.add_row(predicate.name, predicate.arity, predicate.description)
    console.print(table)
