"""Error taxonomy for the pipeline.

Fatal errors (`ConfigError`, `CacheDirectoryError`) abort the run before or
at the start of the pipeline. The rest are scoped to a single source, file
or output and are caught at that unit's boundary.
"""

from __future__ import annotations


class DnsHoleError(Exception):
    """Base class for every error raised by dns-hole."""


class ConfigError(DnsHoleError):
    """Missing, unreadable or invalid blocklist configuration."""


class CacheDirectoryError(DnsHoleError):
    """The scratch/cache directory cannot be created or written."""


class SourceFetchError(DnsHoleError):
    """A single source could not be downloaded or copied."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(DnsHoleError):
    """A fetched file could not be opened or read to the end."""


class RenderError(DnsHoleError):
    """The zone file could not be written."""
