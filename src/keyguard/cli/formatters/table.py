"""Table formatter for CLI output."""

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from keyguard.models import ScanJob, ScanStatus

SEVERITY_COLORS = {
    "critical": "red",
    "high": "orange1",
    "medium": "yellow",
    "low": "green",
}


def format_scan_result(console: Console, result: ScanJob, show_recommendation: bool = True) -> None:
    """Format and display scan results as tables."""
    ok = result.status == ScanStatus.COMPLETED
    duration = f"{result.duration_seconds:.1f}s" if result.duration_seconds is not None else "N/A"

    console.print()
    console.print(
        Panel(
            f"[bold {'green' if ok else 'red'}]Scan {result.status.value.title()}[/]\n"
            f"URL: [cyan]{result.url}[/cyan]\n"
            f"Scan ID: {result.id}\n"
            f"Duration: {duration}",
            title="Results",
        )
    )

    if result.status == ScanStatus.FAILED:
        console.print(f"[red]Error:[/red] {result.error or 'unknown error'}")
        return

    _format_findings(console, result)
    _format_summary(console, result)

    if show_recommendation and result.recommendation:
        console.print()
        console.print(Panel(Markdown(result.recommendation), title="Recommendations"))


def _format_findings(console: Console, result: ScanJob) -> None:
    """Format the findings table."""
    if not result.findings:
        console.print("[green]No exposed API keys found[/green]")
        return

    table = Table(title="Exposed Credentials", show_header=True)
    table.add_column("Severity")
    table.add_column("Type", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_column("Location")
    table.add_column("Line", justify="right")
    table.add_column("Confidence", justify="right")

    for finding in result.findings:
        color = SEVERITY_COLORS.get(finding.severity.value, "white")
        table.add_row(
            f"[{color}]{finding.severity.value.upper()}[/{color}]",
            finding.key_type,
            finding.masked_value,
            finding.location[:60] + "..." if len(finding.location) > 60 else finding.location,
            str(finding.line_number) if finding.line_number else "-",
            f"{finding.confidence:.0%}",
        )

    console.print(table)


def _format_summary(console: Console, result: ScanJob) -> None:
    """Format severity counts."""
    summary = result.summary
    parts = []
    for name in ("critical", "high", "medium", "low"):
        count = getattr(summary, name)
        if count:
            color = SEVERITY_COLORS[name]
            parts.append(f"[{color}]{name.title()}: {count}[/{color}]")

    detail = f" ({', '.join(parts)})" if parts else ""
    console.print(f"\n[bold]Findings:[/bold] {summary.total}{detail}")
