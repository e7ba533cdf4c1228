#!/usr/bin/env python3
"""Command-line client for the query engine."""
import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.theme import Theme
from typing_extensions import Annotated

from querydesk.common.contracts import (
    ConnectionTarget,
    ExecutionFailure,
    ExecutionOutcome,
    QueryMode,
    QueryRequest,
    TabularResult,
)
from querydesk.execution.dispatcher import QueryDispatcher
from querydesk.security.commands import ALLOWED_COMMANDS
from querydesk.execution.translator import SUPPORTED_GRAMMAR

custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
})

console = Console(theme=custom_theme)

app = typer.Typer(
    name="querydesk",
    help="Run queries against the Snowflake warehouse or the Kubernetes cluster.",
    no_args_is_help=True,
    add_completion=False,
)

TargetOption = Annotated[
    ConnectionTarget,
    typer.Option("--target", "-t", help="Backend to query", case_sensitive=False),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Print the raw response envelope")]


def render_outcome(outcome: ExecutionOutcome, as_json: bool = False) -> None:
    if as_json:
        console.print_json(json.dumps(outcome.to_response(), default=str))
        return

    if isinstance(outcome, ExecutionFailure):
        console.print(f"[error]✘ {outcome.category}: {outcome.message}[/error]")
        return

    if outcome.message:
        console.print(f"[success]✔ {outcome.message}[/success]")

    data = outcome.data
    if isinstance(data, TabularResult):
        table = Table(show_lines=False)
        for column in data.columns:
            table.add_column(column, style="cyan", overflow="fold")
        for row in data.rows:
            table.add_row(*("" if cell is None else str(cell) for cell in row))
        console.print(table)
    else:
        console.print(data.message, markup=False, highlight=False)
        if data.rows_affected is not None:
            console.print(f"[info]Rows affected: {data.rows_affected}[/info]")

    console.print(f"[info]{data.row_count} row(s) in {outcome.elapsed_ms}ms[/info]")


@app.command()
def run(
    query: Annotated[str, typer.Argument(help="Statement, kubectl command or resource query")],
    target: TargetOption = ConnectionTarget.WAREHOUSE,
    mode: Annotated[
        Optional[QueryMode],
        typer.Option("--mode", "-m", help="Cluster query type: kubectl or sql", case_sensitive=False),
    ] = None,
    as_json: JsonOption = False,
):
    """
    Execute a query and print the normalized result.
    """
    dispatcher = QueryDispatcher()
    outcome = dispatcher.execute(QueryRequest(target=target, mode=mode, text=query))
    render_outcome(outcome, as_json)
    if isinstance(outcome, ExecutionFailure):
        raise typer.Exit(code=1)


@app.command()
def ping(
    target: Annotated[ConnectionTarget, typer.Argument(help="Backend to probe", case_sensitive=False)],
    as_json: JsonOption = False,
):
    """
    Check connectivity to a backend.
    """
    outcome = QueryDispatcher().test_connection(target)
    render_outcome(outcome, as_json)
    if isinstance(outcome, ExecutionFailure):
        raise typer.Exit(code=1)


@app.command()
def commands():
    """
    Show the accepted kubectl verbs and resource-query grammar.
    """
    table = Table(title="Cluster query reference")
    table.add_column("Mode", style="cyan", no_wrap=True)
    table.add_column("Accepted input", style="magenta")
    table.add_row(QueryMode.NATIVE_COMMAND.value, ", ".join(ALLOWED_COMMANDS))
    table.add_row(QueryMode.RESOURCE_QUERY.value, SUPPORTED_GRAMMAR)
    console.print(table)


def main():
    app()

if __name__ == "__main__":
    main()
