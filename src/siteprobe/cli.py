"""siteprobe CLI - website security-posture scanner."""

import asyncio
import json
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from siteprobe.config import get_bool, get_db_path, load_settings
from siteprobe.exceptions import ScanInputError, ScanNotFound
from siteprobe.modules.scanner import ScanService, is_risky
from siteprobe.modules.scanner.reporting import print_scan_result
from siteprobe.modules.store import ScanStore
from siteprobe.modules.store.manager import record_to_result

app = typer.Typer(
    name="siteprobe",
    help="Website security-posture scanner",
    no_args_is_help=True,
)
console = Console()

# Exit code for rejected input, the CLI analogue of HTTP 400.
EXIT_INPUT_ERROR = 2


def configure_logging(verbose: bool) -> None:
    """Send log records through Rich on stderr."""
    verbose = verbose or get_bool("SITEPROBE_VERBOSE")
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def get_store() -> ScanStore:
    return ScanStore(get_db_path())


@app.command()
def version() -> None:
    """Show the installed siteprobe version."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        current_version = pkg_version("siteprobe")
    except PackageNotFoundError:
        current_version = "0.0.0+unknown"

    console.print(f"siteprobe {current_version}")


@app.command()
def scan(
    url: str = typer.Argument(..., help="Target URL (http or https)"),
    json_output: bool = typer.Option(False, "--json", help="Print the stored record as JSON"),
    allow_active_auth: bool = typer.Option(
        False,
        "--allow-active-auth",
        help="Send live login attempts (only against targets you are authorized to test)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show probe logging"),
) -> None:
    """Scan a URL and store the result."""
    configure_logging(verbose)
    overrides = {"allow_active_auth_probes": True} if allow_active_auth else {}
    service = ScanService(get_store(), load_settings(**overrides))

    try:
        record = asyncio.run(service.create_scan(url))
    except ScanInputError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(EXIT_INPUT_ERROR)

    if json_output:
        console.print_json(json.dumps(record.to_dict()))
        return
    print_scan_result(record_to_result(record), console)
    console.print(f"\n[dim]Saved as scan #{record.id}[/dim]")


@app.command("list")
def list_scans() -> None:
    """List stored scans, newest first."""
    records = get_store().list()
    if not records:
        console.print("[yellow]No scans stored yet.[/yellow]")
        return

    table = Table(title="Scans")
    table.add_column("ID", justify="right")
    table.add_column("Created")
    table.add_column("URL")
    table.add_column("Scrapable")
    table.add_column("DDoS protected")
    table.add_column("Findings", justify="right")
    for record in records:
        result = record_to_result(record)
        url_style = "red" if is_risky(result) else "green"
        table.add_row(
            str(record.id),
            record.created_at.strftime("%Y-%m-%d %H:%M") if record.created_at else "-",
            f"[{url_style}]{record.url}[/{url_style}]",
            "yes" if record.is_scrapable else "no",
            "yes" if record.ddos_protected else "no",
            str(len(record.findings)),
        )
    console.print(table)


@app.command()
def show(
    scan_id: int = typer.Argument(..., help="Stored scan id"),
    json_output: bool = typer.Option(False, "--json", help="Print the stored record as JSON"),
) -> None:
    """Show one stored scan."""
    service = ScanService(get_store(), load_settings())
    try:
        record = service.get_scan(scan_id)
    except ScanNotFound as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)

    if json_output:
        console.print_json(json.dumps(record.to_dict()))
        return
    print_scan_result(record_to_result(record), console)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
