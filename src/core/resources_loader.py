"""Filesystem resources: cache directory and default config location.

The cache directory is always passed explicitly through the pipeline; nothing
here keeps process-wide state.
"""

from __future__ import annotations

import os
from pathlib import Path

from core.config import AppSettings, get_user_config_dir
from core.errors import CacheDirectoryError

CONFIG_FILENAME = "config.json"


def ensure_cache_dir(path: Path) -> Path:
    """Create (if needed) and check the scratch directory.

    Raises `CacheDirectoryError` when it cannot be created or written; callers
    treat that as fatal.
    """

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CacheDirectoryError(f"Cannot create or access the cache dir: {path} ({exc})") from exc

    if not path.is_dir() or not os.access(path, os.W_OK | os.X_OK):
        raise CacheDirectoryError(f"Cannot create or access the cache dir: {path}")
    return path


def get_default_config_path(filename: str = CONFIG_FILENAME) -> Path | None:
    """Look for a config file in common locations.

    Order:
    1) ./<filename> (cwd)
    2) <user config dir>/<filename>
    """

    candidates = [
        Path.cwd() / filename,
        get_user_config_dir() / filename,
    ]
    for p in candidates:
        if p.exists() and p.is_file():
            return p
    return None


def resolve_config_path(settings: AppSettings, override: Path | None = None) -> Path:
    """Pick the config file: explicit override, then settings, then defaults."""

    if override is not None:
        return override
    if settings.config_path.exists():
        return settings.config_path
    return get_default_config_path(settings.config_path.name) or settings.config_path
