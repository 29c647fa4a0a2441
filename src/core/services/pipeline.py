"""Blocklist update orchestration.

Fetch → parse/validate → deduplicate → render. The CLI delegates the whole
flow to `run_pipeline`, which keeps side-effects such as printing and
progress bars out of the core logic and makes the flow reusable from tests
or other entry-points.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import httpx

from adapters.zone_writer import write_zone_file
from core.config import AppSettings, BlocklistConfig
from core.domain.models import (
    AggregateResult,
    FetchedFile,
    FetchOutcome,
    FileReport,
    OutputFormat,
    RunSummary,
)
from core.services.aggregator import aggregate
from core.services.fetcher import fetch_sources

logger = logging.getLogger(__name__)


@dataclass
class PipelineRequest:
    """Per-run overrides on top of the config file and settings."""

    output_path: Path | None = None
    output_format: OutputFormat | None = None
    sort_output: bool | None = None


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress, warnings)."""

    source_skipped: Callable[[FetchOutcome], None] | None = None
    file_processed: Callable[[FileReport], None] | None = None


@dataclass
class PipelineResult:
    """Output of a pipeline invocation."""

    summary: RunSummary
    aggregate: AggregateResult
    outcomes: list[FetchOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.summary.ok


def resolve_output_path(
    *,
    settings: AppSettings,
    config: BlocklistConfig,
    request: PipelineRequest,
) -> Path:
    if request.output_path is not None:
        return request.output_path
    return settings.cache_dir / config.zone_db


async def run_pipeline(
    *,
    settings: AppSettings,
    config: BlocklistConfig,
    request: PipelineRequest | None = None,
    hooks: PipelineHooks | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> PipelineResult:
    """Run one full update.

    Raises `CacheDirectoryError` when the cache dir is unusable. Per-source,
    per-file and write failures are reported in the result instead.
    """

    request = request or PipelineRequest()
    hooks = hooks or PipelineHooks()

    outcomes = await fetch_sources(
        config.sources,
        cache_dir=settings.cache_dir,
        settings=settings,
        http_transport=http_transport,
    )

    skipped: list[str] = []
    fetched: list[FetchedFile] = []
    for outcome in outcomes:
        if outcome.ok and outcome.file is not None:
            fetched.append(outcome.file)
            continue
        skipped.append(outcome.source.name)
        if hooks.source_skipped:
            hooks.source_skipped(outcome)

    aggregate_result = aggregate(fetched, on_report=hooks.file_processed)

    sort_output = settings.sort_output if request.sort_output is None else request.sort_output
    domains = sorted(aggregate_result.domains) if sort_output else aggregate_result.domains

    render = write_zone_file(
        domains=domains,
        output_path=resolve_output_path(settings=settings, config=config, request=request),
        blocked_zone=config.blocked_zone_path,
        output_format=request.output_format or config.output_format,
        soa=config.rpz,
    )

    summary = RunSummary(
        sources_attempted=len(outcomes),
        sources_fetched=len(fetched),
        skipped_sources=skipped,
        files_analyzed=aggregate_result.files_analyzed,
        files_failed=aggregate_result.files_failed,
        entries_found=aggregate_result.final_count,
        entries_seen=aggregate_result.initial_count,
        duplicate_rate=aggregate_result.duplicate_rate,
        render=render,
    )
    return PipelineResult(summary=summary, aggregate=aggregate_result, outcomes=outcomes)
