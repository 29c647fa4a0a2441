"""Local transport: copies a list from the filesystem into the cache directory."""

from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path

from adapters.sources.naming import cache_path_for, discard
from core.domain.models import SourceDescriptor
from core.errors import SourceFetchError
from core.interfaces.transport import SourceTransport

logger = logging.getLogger(__name__)


class LocalCopyTransport(SourceTransport):
    """Copies non-remote sources; a missing file skips the source."""

    async def fetch(self, source: SourceDescriptor, dest_dir: Path) -> Path:
        origin = Path(source.url).expanduser()
        logger.info("Copying local file %s", origin)

        if not origin.is_file():
            raise SourceFetchError(f"Local file not found: {origin}")

        dest = cache_path_for(source, dest_dir)
        if origin.resolve() == dest.resolve():
            return dest
        try:
            await asyncio.to_thread(shutil.copyfile, origin, dest)
        except OSError as exc:
            discard(dest)
            raise SourceFetchError(f"Cannot copy {origin} to {dest}: {exc}") from exc
        return dest

