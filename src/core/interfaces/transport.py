"""Contract for source transports.

A transport turns one `SourceDescriptor` into a readable file inside the
cache directory, or raises `SourceFetchError`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from core.domain.models import SourceDescriptor


@runtime_checkable
class SourceTransport(Protocol):
    """Minimal contract for materializing a blocklist source.

    Design rules:
    - `fetch` is async because remote transports do network I/O.
    - Failures raise `SourceFetchError`; no partial file is left behind.
    """

    async def fetch(self, source: SourceDescriptor, dest_dir: Path) -> Path:
        """Materialize `source` under `dest_dir` and return the file path."""

        ...
