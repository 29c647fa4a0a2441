"""dns-hole command line interface (Typer).

Commands:
- `update`: download, deduplicate and write the zone file.
- `sources`: list the configured sources.
- `init`: write a starter config file.
- `doctor run`: environment diagnostics.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.json_exporter import export_summary_json
from cli import doctor
from cli.ui_components import (
    build_files_table,
    build_sources_table,
    build_summary_table,
    print_banner,
)
from core.config import (
    AppSettings,
    BlocklistConfig,
    load_blocklist_config,
    load_settings,
    write_blocklist_config,
)
from core.domain.models import (
    FetchOutcome,
    FileReport,
    FormatKind,
    OutputFormat,
    SourceDescriptor,
)
from core.errors import CacheDirectoryError, ConfigError
from core.resources_loader import resolve_config_path
from core.services.pipeline import PipelineHooks, PipelineRequest, run_pipeline

app = typer.Typer(
    no_args_is_help=True,
    help="Aggregate domain blocklists into a bind zone or RPZ file.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _abort(message: str) -> NoReturn:
    _console.print(f"[red] x ERROR:[/red] {escape(message)} Aborting..")
    raise typer.Exit(code=1)


def _load_settings() -> AppSettings:
    try:
        return load_settings()
    except ConfigError as exc:
        _abort(str(exc))


def _load_config(path: Path) -> BlocklistConfig:
    _console.print(f"* Reading block sites list from [cyan]{path}[/cyan]")
    try:
        return load_blocklist_config(path)
    except ConfigError as exc:
        _abort(str(exc))


@app.command()
def update(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.json."),
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir", help="Scratch directory for lists and output."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the zone file here instead."),
    output_format: Optional[OutputFormat] = typer.Option(
        None,
        "--format",
        "-f",
        case_sensitive=False,
        help="Override zoneFileType from the config (dns or rpz).",
    ),
    sort: bool = typer.Option(False, "--sort", help="Write domains in sorted order."),
    summary_json: Optional[Path] = typer.Option(None, "--summary-json", help="Also export the run summary as JSON."),
    show_files: bool = typer.Option(False, "--show-files", help="Print a per-file table."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Skip the banner."),
) -> None:
    """Download every source, deduplicate the domains and write the zone file."""

    settings = _load_settings()
    if cache_dir is not None:
        settings = settings.model_copy(update={"cache_dir": cache_dir})
    configure_logging("DEBUG" if verbose else settings.log_level)

    if not no_banner:
        print_banner(_console)

    config = _load_config(resolve_config_path(settings, config_path))

    def on_skipped(outcome: FetchOutcome) -> None:
        _console.print(f"  [red]x[/red] {outcome.source.name}: {outcome.error}")

    def on_file(report: FileReport) -> None:
        if report.error is None:
            _console.print(f"  [green]+[/green] Found {report.entries} DNS entries in {report.path}")
        else:
            _console.print(
                f"  [red]x[/red] Error processing {report.path} with {report.format.value} format"
            )

    request = PipelineRequest(
        output_path=output,
        output_format=output_format,
        sort_output=True if sort else None,
    )
    hooks = PipelineHooks(source_skipped=on_skipped, file_processed=on_file)

    _console.print(f"* Fetching {len(config.sources)} sources into [cyan]{settings.cache_dir}[/cyan]")
    try:
        result = asyncio.run(run_pipeline(settings=settings, config=config, request=request, hooks=hooks))
    except CacheDirectoryError as exc:
        _abort(str(exc))

    if show_files:
        _console.print(build_files_table(result.aggregate.files))
    _console.print(build_summary_table(result.summary))

    if summary_json is not None:
        path = export_summary_json(summary=result.summary, output_path=summary_json)
        _console.print(f"[dim]Summary saved to {path}[/dim]")

    if not result.ok:
        raise typer.Exit(code=1)
    _console.print("[green]Success[/green]")


@app.command()
def sources(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.json."),
) -> None:
    """Show the configured sources and how each one is fetched."""

    settings = _load_settings()
    config = _load_config(resolve_config_path(settings, config_path))
    _console.print(build_sources_table(config.sources))
    _console.print(
        f"Output: [cyan]{config.zone_db}[/cyan] ({config.output_format.value}), "
        f"blocked zone: [cyan]{config.blocked_zone_path}[/cyan]"
    )


@app.command()
def init(
    config_path: Path = typer.Option(Path("config.json"), "--config", "-c", help="Where to write the config."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    """Interactive setup: write a starter config.json."""

    if config_path.exists() and not force:
        raise typer.BadParameter(f"{config_path} already exists (use --force to overwrite)")

    bind_dir = typer.prompt("Bind config directory", default="/etc/bind").strip()
    blocked_zone = typer.prompt("Blocked zone file", default="blocked.zone").strip()
    zone_db = typer.prompt("Generated zone file name", default="blacklisted.zones").strip()
    zone_type = typer.prompt("Zone file type (dns/rpz)", default=OutputFormat.DNS.value).strip().lower()

    source_url = typer.prompt("First source URL or path (empty to skip)", default="", show_default=False).strip()
    sources_list: list[SourceDescriptor] = []
    if source_url:
        source_name = typer.prompt("Source name", default="source-1").strip()
        source_format = typer.prompt(
            "Source format (two-col/one-col/dnsmasq)",
            default=FormatKind.TWO_COLUMN.value,
        ).strip().lower()
        try:
            sources_list.append(
                SourceDescriptor(url=source_url, name=source_name, format=FormatKind(source_format))
            )
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc

    try:
        config = BlocklistConfig(
            sources=sources_list,
            zone_db=zone_db,
            bind_config_dir=bind_dir,
            blocked_zone=blocked_zone,
            output_format=OutputFormat(zone_type),
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    path = write_blocklist_config(config, config_path)
    _console.print(f"[green]Saved config to:[/green] {path}")


def run() -> None:
    app()
