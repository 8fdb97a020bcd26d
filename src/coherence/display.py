"""Rich-based terminal display for verification results.

Uses a module-level :class:`~rich.console.Console` singleton so output is
formatted consistently and tests can swap it for a capturing console.
"""

from __future__ import annotations

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from src.coherence.classifier import render_framework
from src.coherence.models import GraphResult, Severity, VerificationReport
from src.shared.constants import VERSION

# ---------------------------------------------------------------------------
# Module-level Console singleton
# ---------------------------------------------------------------------------

_console = Console()


# ---------------------------------------------------------------------------
# Display functions
# ---------------------------------------------------------------------------


def print_verification_summary(report: VerificationReport) -> None:
    """Print a panel with the verdict, counts and the mismatch table.

    Parameters
    ----------
    report:
        The :class:`VerificationReport` returned by ``verify_all``.
    """
    if not report.verified:
        style = "dim"
        verdict = "DISABLED"
    elif report.success:
        style = "green"
        verdict = "PASSED"
    else:
        style = "red"
        verdict = "FAILED"

    content = Text()
    content.append(f"Verdict: {verdict}\n", style=f"bold {style}")
    content.append(f"Behavior: {report.behavior.describe()}\n")
    if report.graph is not None:
        content.append(f"Visited: {len(report.graph.visits)}\n")
    content.append(f"Skipped: {len(report.skipped)}\n")
    content.append(f"Warnings: {len(report.warnings)}\n")
    content.append(f"Errors: {len(report.errors)}")

    renderables: list = [content]
    if report.findings:
        renderables.append(_mismatch_table(report))

    _console.print(
        Panel(
            Group(*renderables),
            title=f"[bold]Coherence Verification[/bold] [dim]v{VERSION}[/dim]",
            border_style=style,
            expand=False,
        )
    )


def _mismatch_table(report: VerificationReport) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Severity", justify="center")
    table.add_column("Package", style="cyan")
    table.add_column("Dependency")
    table.add_column("Requested", justify="right")
    table.add_column("Framework")
    table.add_column("Built", justify="right")

    for finding in report.findings:
        mismatch = finding.mismatch
        severity_style = "red" if finding.severity is Severity.ERROR else "yellow"
        table.add_row(
            Text(finding.severity.value, style=severity_style),
            finding.package.id,
            mismatch.dependency.id,
            str(mismatch.dependency.version_range),
            render_framework(mismatch.target_framework),
            str(mismatch.resolved.version),
        )
    return table


def print_graph(result: GraphResult) -> None:
    """Print product dependency edges, one row per edge."""
    edges = result.edges()
    if not edges:
        _console.print("[dim]No product dependencies found.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", title="Product Dependencies")
    table.add_column("Package", style="cyan")
    table.add_column("Depends On", style="green")
    for source, target in edges:
        table.add_row(source, target)
    _console.print(table)


def print_error_panel(error: str | Exception) -> None:
    """Print an error message in a red Rich panel.

    Parameters
    ----------
    error:
        Error message string or Exception instance.
    """
    error_text = str(error)
    _console.print(
        Panel(
            Text(error_text, style="bold white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            expand=False,
        )
    )
