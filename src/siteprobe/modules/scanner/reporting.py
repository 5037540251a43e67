"""Scanner output helpers."""

from rich.console import Console
from rich.table import Table

from .models import ScanResult, Severity

SEVERITY_STYLES = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
    Severity.INFO: "dim",
}


def print_scan_result(result: ScanResult, console: Console | None = None) -> None:
    """Print verdicts and findings of one scan."""
    console = console or Console()

    scrapable = "[red]yes[/red]" if result.is_scrapable else "[green]no[/green]"
    protected = "[green]yes[/green]" if result.ddos_protected else "[red]no[/red]"
    console.print(f"\n[bold]{result.url}[/bold] ({result.target_ip or 'unknown IP'})")
    console.print(f"Server: {result.server} | Scrapable: {scrapable} | DDoS protected: {protected}")

    if not result.findings:
        console.print("\n[green][+] No findings.[/green]")
        return

    counts = {severity: 0 for severity in Severity}
    for finding in result.findings:
        counts[finding.severity] += 1
    summary = " | ".join(f"{severity.value.title()}: {count}" for severity, count in counts.items())
    console.print(f"\nTotal: {len(result.findings)} | {summary}")

    table = Table(show_lines=False)
    table.add_column("Severity")
    table.add_column("Category")
    table.add_column("Title")
    table.add_column("Detail", overflow="fold")
    for finding in result.findings:
        style = SEVERITY_STYLES[finding.severity]
        table.add_row(
            f"[{style}]{finding.severity.value}[/{style}]",
            finding.category,
            finding.title,
            finding.detail,
        )
    console.print(table)
