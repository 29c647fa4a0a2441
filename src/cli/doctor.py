"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import httpx
import typer
from jinja2 import TemplateError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.zone_writer import get_zone_template
from core.config import AppSettings, BlocklistConfig, load_blocklist_config, load_settings
from core.domain.models import OutputFormat
from core.errors import CacheDirectoryError, ConfigError
from core.resources_loader import ensure_cache_dir, resolve_config_path

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.head(url)
        return response.status_code < 400, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or exc.__class__.__name__


async def _check_remote_sources(config: BlocklistConfig, settings: AppSettings) -> list[tuple[str, bool, str]]:
    remote = [source for source in config.sources if source.is_remote]
    results = await asyncio.gather(*(_check_http(source.url, settings) for source in remote))
    return [(source.name, ok, detail) for source, (ok, detail) in zip(remote, results)]


def _check_templates() -> tuple[bool, str]:
    try:
        for output_format in OutputFormat:
            get_zone_template(output_format)
        return True, "dns, rpz"
    except TemplateError as exc:
        return False, str(exc)


@app.command()
def run(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.json."),
    skip_network: bool = typer.Option(False, "--skip-network", help="Do not contact remote sources."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    try:
        settings = load_settings()
    except ConfigError as exc:
        _console.print(f"[red]Settings:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    path = resolve_config_path(settings, config_path)

    table = Table(title="DNS-Hole Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    config: BlocklistConfig | None = None
    try:
        config = load_blocklist_config(path)
        table.add_row("Config", "OK", f"{path} ({len(config.sources)} sources)")
    except ConfigError as exc:
        table.add_row("Config", "FAIL", escape(str(exc)))

    # Cache dir
    try:
        ensure_cache_dir(settings.cache_dir)
        table.add_row("Cache dir", "OK", str(settings.cache_dir))
    except CacheDirectoryError as exc:
        table.add_row("Cache dir", "FAIL", str(exc))

    ok_tpl, detail_tpl = _check_templates()
    table.add_row("Zone templates", "OK" if ok_tpl else "FAIL", detail_tpl)

    # Connectivity (best-effort)
    if config is not None and not skip_network:
        for name, ok, detail in asyncio.run(_check_remote_sources(config, settings)):
            table.add_row(f"Source {name}", "OK" if ok else "FAIL", detail)

    _console.print(table)

    if config is None:
        _console.print("\n[yellow]Note:[/yellow] Run `dns-hole init` to create a starter config.")
