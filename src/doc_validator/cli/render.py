"""Rich rendering of validation run summaries."""

from rich.console import Console
from rich.table import Table

from doc_validator.pipeline import OutcomeKind, ValidationRunReport

_KIND_STYLES = {
    OutcomeKind.SUCCESS: "green",
    OutcomeKind.FAILURE: "red",
    OutcomeKind.TIMEOUT: "magenta",
    OutcomeKind.SKIPPED: "yellow",
}

_DISPOSITION_STYLES = {
    "accepted": "green",
    "partial": "yellow",
    "rejected": "red",
}


def render_report(report: ValidationRunReport, console: Console) -> None:
    """Print a validation summary with one row per outcome.

    Args:
        report: The run to render
        console: Target console
    """
    style = _DISPOSITION_STYLES.get(report.disposition, "white")
    console.print(f"\n[bold]Validation summary[/bold] - document {report.document_identifier}")
    console.print(f"Disposition: [{style}]{report.disposition}[/{style}] ({report.message})")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Check")
    table.add_column("Result")
    table.add_column("Message")
    table.add_column("Time (ms)", justify="right")
    table.add_column("Rollback", justify="center")

    for outcome in report.outcomes:
        kind_style = _KIND_STYLES.get(outcome.kind, "white")
        table.add_row(
            outcome.check_name,
            f"[{kind_style}]{outcome.kind.upper()}[/{kind_style}]",
            outcome.message,
            f"{outcome.execution_time_ms:.0f}",
            "yes" if outcome.requires_compensation else "",
        )
    console.print(table)

    console.print(
        f"Passed: {report.successful_checks}  Failed: {report.failed_checks}  "
        f"Timed out: {report.timed_out_checks}  Skipped: {report.skipped_checks}"
    )
    breaker = "[red]OPEN[/red]" if report.breaker_tripped else "closed"
    console.print(f"Circuit breaker: {breaker}")
    if report.rollback_performed:
        console.print(f"Rolled back: {', '.join(report.compensated_checks)}")
    for error in report.compensation_errors:
        console.print(f"[red]Rollback error:[/red] {error}")
