"""Main CLI application."""

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from doc_validator.checks import build_document_pipeline
from doc_validator.cli.render import render_report
from doc_validator.cli.scenarios import build_scenarios
from doc_validator.document import Document
from doc_validator.pipeline import Disposition
from doc_validator.runner import ValidationRunner
from doc_validator.storage import AcceptedIdentifierRegistry

app = typer.Typer(
    name="doc-validator",
    help="Document validator CLI - run documents through the validation pipeline",
    no_args_is_help=True,
)
console = Console()


@app.command()
def validate(
    path: Path = typer.Argument(..., help="JSON file describing the document"),
    as_json: bool = typer.Option(False, "--json", help="Print the run report as JSON"),
):
    """Validate a document read from a JSON file.

    Exits with code 1 unless every check passed.

    Examples:
        doc-validator validate invoice.json
        doc-validator validate invoice.json --json
    """
    if not path.exists():
        console.print(f"[red]Error: document file does not exist: {path}[/red]")
        raise typer.Exit(2)

    try:
        document = Document.from_json_file(path)
    except (OSError, ValidationError) as e:
        console.print(f"[red]Error: cannot load document from {path}: {e}[/red]")
        raise typer.Exit(2) from e

    report = ValidationRunner().report(document)

    if as_json:
        typer.echo(report.model_dump_json(indent=2))
    else:
        render_report(report, console)

    if report.disposition != Disposition.ACCEPTED:
        raise typer.Exit(1)


@app.command()
def demo():
    """Run the demonstration scenarios against a fresh identifier registry."""
    pipeline = build_document_pipeline(registry=AcceptedIdentifierRegistry())

    for index, scenario in enumerate(build_scenarios(), start=1):
        console.rule(f"Scenario {index}: {scenario.title}")
        state = scenario.execute(pipeline)
        render_report(pipeline.summarize(state), console)
