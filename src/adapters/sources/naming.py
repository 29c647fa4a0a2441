"""Cache file naming for fetched sources."""

from __future__ import annotations

import contextlib
from pathlib import Path

from core.domain.models import SourceDescriptor


def cache_path_for(source: SourceDescriptor, dest_dir: Path) -> Path:
    return dest_dir / f"{source.cache_stem}.txt"


def discard(path: Path) -> None:
    """Remove a partially written file, if any."""

    with contextlib.suppress(OSError):
        path.unlink(missing_ok=True)
