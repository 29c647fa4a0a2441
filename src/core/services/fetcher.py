"""Source fetching orchestration.

Each source is materialized independently: a failure skips that source only.
Downloads may overlap (bounded by a semaphore) but outcomes are always
returned in the order the sources were declared.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Sequence

import httpx

from adapters.http_client import build_async_client
from adapters.sources import HttpsSourceTransport, LocalCopyTransport, cache_path_for
from core.config import AppSettings
from core.domain.models import FetchedFile, FetchOutcome, FetchStatus, SourceDescriptor
from core.errors import SourceFetchError
from core.interfaces.transport import SourceTransport
from core.resources_loader import ensure_cache_dir

logger = logging.getLogger(__name__)


def select_transport(
    source: SourceDescriptor,
    *,
    remote: SourceTransport,
    local: SourceTransport,
) -> SourceTransport:
    return remote if source.is_remote else local


async def fetch_sources(
    sources: Sequence[SourceDescriptor],
    *,
    cache_dir: Path,
    settings: AppSettings | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> list[FetchOutcome]:
    """Materialize every source under `cache_dir`.

    Raises `CacheDirectoryError` when the cache dir is unusable; every other
    failure becomes a skipped `FetchOutcome`.
    """

    settings = settings or AppSettings()
    ensure_cache_dir(cache_dir)

    owners: dict[str, int] = {}
    for index, source in enumerate(sources):
        owners.setdefault(source.cache_stem.lower(), index)

    semaphore = asyncio.Semaphore(settings.fetch_max_concurrency)
    local = LocalCopyTransport()

    async with build_async_client(settings, transport=http_transport) as client:
        remote = HttpsSourceTransport(client)

        async def fetch_one(index: int, source: SourceDescriptor) -> FetchOutcome:
            owner = owners[source.cache_stem.lower()]
            if owner != index:
                message = (
                    f"Cache file {cache_path_for(source, cache_dir).name} "
                    f"is already used by {sources[owner].name!r}"
                )
                logger.warning("Skipping source %r (%s): %s", source.name, source.url, message)
                return FetchOutcome(source=source, status=FetchStatus.SKIPPED, error=message)

            transport = select_transport(source, remote=remote, local=local)
            async with semaphore:
                try:
                    path = await transport.fetch(source, cache_dir)
                except SourceFetchError as exc:
                    logger.warning("Skipping source %r (%s): %s", source.name, source.url, exc)
                    return FetchOutcome(
                        source=source,
                        status=FetchStatus.SKIPPED,
                        error=str(exc),
                    )
            return FetchOutcome(
                source=source,
                status=FetchStatus.SUCCESS,
                file=FetchedFile(path=path, format=source.format, source=source.name),
            )

        return list(await asyncio.gather(*(fetch_one(index, source) for index, source in enumerate(sources))))
