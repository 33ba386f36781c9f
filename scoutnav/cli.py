"""scoutnav CLI — Entry point for browsing ScoutSuite findings."""

import json
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from scoutnav import __app_name__, __version__
from scoutnav.ai.advisor import AdvisoryClient
from scoutnav.config import load_settings
from scoutnav.core.report import load_findings, locate_report, read_findings
from scoutnav.errors import ConfigError, ScoutNavError
from scoutnav.models import Finding
from scoutnav.ui.keyboard import open_keyboard
from scoutnav.ui.navigator import Navigator

# ---------------------------------------------------------------------------
# App & Console
# ---------------------------------------------------------------------------

app = typer.Typer(
    name=__app_name__,
    help="🔎 scoutnav — Browse ScoutSuite danger findings and ask for fixes.",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Version callback & logging
# ---------------------------------------------------------------------------


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]{__app_name__}[/bold cyan] v{__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger(__app_name__)
    package_logger.handlers.clear()
    package_logger.addHandler(
        RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    )
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------


@app.callback()
def main(
    version: Optional[bool] = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-v",
        help="Show the application version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log debug details to stderr.",
    ),
) -> None:
    """scoutnav — page through the danger findings of a ScoutSuite AWS report."""
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _fail(exc: ScoutNavError) -> typer.Exit:
    console.print(f"[bold red]✗[/bold red] {escape(str(exc))}")
    return typer.Exit(code=1)


@app.command()
def browse() -> None:
    """Step through danger findings one key press at a time."""
    try:
        settings = load_settings()
    except ConfigError as exc:
        console.print(f"[bold yellow]![/bold yellow] {escape(str(exc))}")
        raise typer.Exit() from exc

    try:
        report_path = locate_report()
        console.print(f"[dim]Report:[/dim] {escape(report_path)}")
        findings = read_findings(report_path)
    except ScoutNavError as exc:
        raise _fail(exc) from exc

    if not findings:
        console.print("[bold green]✔[/bold green] No danger-level findings in report")
        raise typer.Exit()

    advisor = AdvisoryClient(settings)

    try:
        with open_keyboard() as read_key:
            Navigator(
                findings,
                console=console,
                advisor=advisor,
                read_key=read_key,
            ).run()
    except ScoutNavError as exc:
        raise _fail(exc) from exc


@app.command("list")
def list_findings(
    output_json: bool = typer.Option(
        False,
        "--json",
        help="Output findings as JSON instead of a Rich table.",
    ),
) -> None:
    """List every danger finding without entering interactive mode."""
    try:
        findings = load_findings()
    except ScoutNavError as exc:
        raise _fail(exc) from exc

    if output_json:
        _print_json(findings)
    else:
        _print_rich(findings)


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def _print_json(findings: list[Finding]) -> None:
    """Print findings as structured JSON."""
    print(json.dumps([finding.to_dict() for finding in findings], indent=2))


def _print_rich(findings: list[Finding]) -> None:
    """Render findings as a Rich table, or a panel when there are none."""
    if not findings:
        console.print(
            Panel(
                "[bold green]✔ No danger-level findings in report[/bold green]",
                border_style="green",
            )
        )
        return

    table = Table(
        title="🚨 Danger Findings",
        show_lines=True,
        header_style="bold magenta",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Service", style="cyan")
    table.add_column("Description", max_width=60)
    table.add_column("Flagged", justify="right", style="bold red")
    table.add_column("Checked", justify="right", style="dim")

    for idx, finding in enumerate(findings, start=1):
        table.add_row(
            str(idx),
            finding.service,
            escape(finding.description),
            str(finding.flagged_items),
            str(finding.checked_items),
        )

    console.print(table)
