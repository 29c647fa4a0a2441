"""Domain models (Pydantic v2).

These models describe *what* flows through the pipeline (sources, fetched
files, aggregated domains, render results), not *how* it is obtained.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class FormatKind(str, Enum):
    """Textual layout of a blocklist source."""

    TWO_COLUMN = "two-col"
    ONE_COLUMN = "one-col"
    DNSMASQ = "dnsmasq"


class OutputFormat(str, Enum):
    """Encoding of the generated name-server artifact."""

    DNS = "dns"
    RPZ = "rpz"


def sanitize_source_name(value: str) -> str:
    """Generate a filesystem-friendly slug from a source name."""

    out: list[str] = []
    for ch in value.strip():
        if ch.isalnum() or ch in ("-", "_", "."):
            out.append(ch)
        else:
            out.append("-")
    cleaned = "".join(out).strip("-_.")
    return cleaned or "source"


class FetchStatus(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"


class SourceDescriptor(BaseModel):
    """A blocklist declared in the configuration file."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(
        ...,
        min_length=1,
        description="HTTPS URL or local filesystem path of the list.",
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Human readable name, also used for the cached file name.",
    )
    format: FormatKind = Field(
        ...,
        description="Layout of the list (two-col, one-col or dnsmasq).",
    )

    @property
    def is_remote(self) -> bool:
        return self.url.lower().startswith("https")

    @property
    def cache_stem(self) -> str:
        """File name stem of the local copy in the cache directory."""

        return sanitize_source_name(self.name)


class FetchedFile(BaseModel):
    """A source materialized in the cache directory, ready for parsing."""

    model_config = ConfigDict(frozen=True)

    path: Path
    format: FormatKind
    source: str = Field(..., description="Name of the originating source.")


class FetchOutcome(BaseModel):
    """Result of materializing one source.

    `file` is only set on success; `error` is only set when skipped.
    """

    model_config = ConfigDict(frozen=True)

    source: SourceDescriptor
    status: FetchStatus
    file: FetchedFile | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.SUCCESS


class FileReport(BaseModel):
    path: Path
    format: FormatKind
    entries: int = 0
    error: str | None = None


class AggregateResult(BaseModel):
    """Deduplicated domains plus the bookkeeping reported to the user."""

    domains: list[str] = Field(default_factory=list)
    initial_count: int = Field(default=0, ge=0)
    final_count: int = Field(default=0, ge=0)
    duplicate_rate: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="Share of validated entries that were duplicates (percent).",
    )
    files: list[FileReport] = Field(default_factory=list)

    @property
    def files_analyzed(self) -> int:
        return sum(1 for report in self.files if report.error is None)

    @property
    def files_failed(self) -> int:
        return sum(1 for report in self.files if report.error is not None)


class RpzSoa(BaseModel):
    """Parameters of the RPZ SOA/NS header."""

    model_config = ConfigDict(frozen=True)

    ttl: int = Field(default=86400, ge=0)
    primary_ns: str = Field(default="ns1.example.com.", min_length=1)
    hostmaster: str = Field(default="root.example.com.", min_length=1)
    serial: int = Field(default=2020071001, ge=0)
    refresh: int = Field(default=3600, ge=0)
    retry: int = Field(default=1800, ge=0)
    expire: int = Field(default=604800, ge=0)
    minimum: int = Field(default=86400, ge=0)


class RenderResult(BaseModel):
    ok: bool
    path: Path
    output_format: OutputFormat
    entries_written: int = 0
    error: str | None = None


class RunSummary(BaseModel):
    """What the user sees at the end of a run (console and JSON export)."""

    sources_attempted: int = 0
    sources_fetched: int = 0
    skipped_sources: list[str] = Field(default_factory=list)
    files_analyzed: int = 0
    files_failed: int = 0
    entries_found: int = 0
    entries_seen: int = 0
    duplicate_rate: float = 0.0
    render: RenderResult | None = None

    @property
    def ok(self) -> bool:
        return self.render is not None and self.render.ok
