"""CLI UI components (Rich).

Keeps command logic apart from visual details so tables and panels can be
reused across commands.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import FileReport, RunSummary, SourceDescriptor


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped in non-interactive runs via `--no-banner`)."""

    title = Text("DNS-Hole Processor", style="bold cyan")
    subtitle = Text("Blocklists • Dedup • bind zones", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_sources_table(sources: Iterable[SourceDescriptor]) -> Table:
    table = Table(title="Blocklist Sources")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Format", style="white")
    table.add_column("Transport", style="green")
    table.add_column("Location", style="magenta")
    for source in sources:
        table.add_row(
            source.name,
            source.format.value,
            "https" if source.is_remote else "local copy",
            source.url,
        )
    return table


def build_files_table(reports: Iterable[FileReport]) -> Table:
    table = Table(title="Analyzed Files")
    table.add_column("File", style="white")
    table.add_column("Format", style="cyan", no_wrap=True)
    table.add_column("Entries", style="green", justify="right")
    table.add_column("Error", style="red")
    for report in reports:
        table.add_row(
            str(report.path),
            report.format.value,
            str(report.entries),
            report.error or "",
        )
    return table


def build_summary_table(summary: RunSummary) -> Table:
    """Final run summary: sources, files, entries and write status."""

    table = Table(title="Run Summary", show_header=False)
    table.add_column("Metric", style="bright_green", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("Sources attempted", str(summary.sources_attempted))
    table.add_row("Sources fetched", str(summary.sources_fetched))
    if summary.skipped_sources:
        table.add_row("Skipped sources", ", ".join(summary.skipped_sources))
    table.add_row("Files analyzed", str(summary.files_analyzed))
    if summary.files_failed:
        table.add_row("Files failed", str(summary.files_failed))
    table.add_row("Entries found", str(summary.entries_found))
    table.add_row("Duplicates", f"{summary.duplicate_rate:.1f}%")

    render = summary.render
    if render is None:
        table.add_row("Zone file", "[red]not written[/red]")
    elif render.ok:
        table.add_row("Zone file", f"[green]{render.path}[/green] ({render.output_format.value})")
    else:
        table.add_row("Zone file", f"[red]FAILED[/red] {render.error}")
    return table
