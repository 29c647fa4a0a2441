"""HTTPS transport: streams a remote list into the cache directory."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx

from adapters.sources.naming import cache_path_for, discard
from core.domain.models import SourceDescriptor
from core.errors import SourceFetchError
from core.interfaces.transport import SourceTransport

logger = logging.getLogger(__name__)


class HttpsSourceTransport(SourceTransport):
    """Downloads `https://` sources with a shared `httpx.AsyncClient`.

    Notes:
    - Only status 200 is accepted; anything else skips the source.
    - The body is streamed to disk, never held in memory. File writes run in
      worker threads so overlapping downloads do not stall the event loop.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch(self, source: SourceDescriptor, dest_dir: Path) -> Path:
        dest = cache_path_for(source, dest_dir)
        logger.info("Downloading %s", source.url)

        try:
            async with self._client.stream("GET", source.url) as response:
                if response.status_code != 200:
                    raise SourceFetchError(
                        f"Server returned {response.status_code} when downloading {source.url}",
                        status_code=response.status_code,
                    )
                fh = await asyncio.to_thread(dest.open, "wb")
                try:
                    async for chunk in response.aiter_bytes():
                        await asyncio.to_thread(fh.write, chunk)
                finally:
                    await asyncio.to_thread(fh.close)
        except SourceFetchError:
            discard(dest)
            raise
        except httpx.HTTPError as exc:
            discard(dest)
            raise SourceFetchError(f"Server returned {exc!r} when downloading {source.url}") from exc
        except OSError as exc:
            discard(dest)
            raise SourceFetchError(f"Error writing file {dest}: {exc}") from exc

        logger.debug("Saved %s to %s", source.url, dest)
        return dest
