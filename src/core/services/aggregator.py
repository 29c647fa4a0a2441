"""Cross-source deduplication.

Files are folded in one at a time. A file contributes only if it was parsed to
the end; a failed file adds nothing and is reported.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from core.domain.models import AggregateResult, FetchedFile, FileReport
from core.errors import ParseError
from core.services.parser import iter_domains

logger = logging.getLogger(__name__)


def duplicate_rate(initial_count: int, final_count: int) -> float:
    """Percentage of all validated entries that were duplicates.

    Returns 0.0 when nothing was seen.
    """

    if initial_count <= 0:
        return 0.0
    return (initial_count - final_count) / initial_count * 100


class DomainAggregator:
    """Insertion-ordered set of domains plus duplicate bookkeeping."""

    def __init__(self) -> None:
        self._domains: dict[str, None] = {}
        self.initial_count = 0
        self.reports: list[FileReport] = []

    def add_entries(self, entries: Iterable[str]) -> int:
        """Fold already-validated entries in; returns how many were seen."""

        seen = 0
        for entry in entries:
            seen += 1
            self._domains.setdefault(entry, None)
        self.initial_count += seen
        return seen

    def add_file(self, fetched: FetchedFile) -> FileReport:
        try:
            entries = list(iter_domains(fetched.path, fetched.format))
        except ParseError as exc:
            logger.error(
                "Error processing %s with %s format: %s",
                fetched.path,
                fetched.format.value,
                exc,
            )
            report = FileReport(path=fetched.path, format=fetched.format, error=str(exc))
        else:
            self.add_entries(entries)
            logger.info("Found %d DNS entries in %s", len(entries), fetched.path)
            report = FileReport(path=fetched.path, format=fetched.format, entries=len(entries))
        self.reports.append(report)
        return report

    @property
    def final_count(self) -> int:
        return len(self._domains)

    @property
    def duplicate_rate(self) -> float:
        return duplicate_rate(self.initial_count, self.final_count)

    def result(self) -> AggregateResult:
        return AggregateResult(
            domains=list(self._domains),
            initial_count=self.initial_count,
            final_count=self.final_count,
            duplicate_rate=self.duplicate_rate,
            files=list(self.reports),
        )


def aggregate(
    files: Iterable[FetchedFile],
    *,
    on_report: Callable[[FileReport], None] | None = None,
) -> AggregateResult:
    """Parse, validate and deduplicate `files` in order."""

    files = list(files)
    logger.info("Analyzing %d DNS hole files", len(files))

    aggregator = DomainAggregator()
    for fetched in files:
        report = aggregator.add_file(fetched)
        if on_report:
            on_report(report)

    result = aggregator.result()
    logger.info(
        "Added a total of %d entries (%.1f%% duplicate)",
        result.final_count,
        result.duplicate_rate,
    )
    return result
