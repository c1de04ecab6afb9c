"""
CLI utility helpers: output formatting for Results.
"""

from __future__ import annotations

import json
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from unwind.core.errors import describe
from unwind.core.result import Err, Ok, Result

console = Console()
err_console = Console(stderr=True)


def output_result(
    result: Result[Any],
    *,
    as_json: bool = False,
) -> None:
    """Render a ``Result`` to the terminal, exiting 1 on ``Err``."""
    match result:
        case Ok(value):
            if as_json:
                console.print_json(json.dumps(result.to_dict(), default=str))
            else:
                console.print(str(value))
        case Err(error):
            if as_json:
                console.print_json(json.dumps(result.to_dict(), default=str))
            else:
                err_console.print(
                    f"[bold red]Error[/bold red] ({error.tag.value}): {escape(error.render())}",
                    highlight=False,
                )
                fields = describe(error, include_message=False)
                if fields:
                    err_console.print(_fields_table(fields))
            raise typer.Exit(code=1)


def _fields_table(fields: dict[str, str]) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("field", style="dim")
    table.add_column("value")
    for key, value in fields.items():
        table.add_row(key, value)
    return table
