"""Configuration.

Two layers:
- `AppSettings`: process-level knobs from env vars / `.env` (pydantic-settings).
- `BlocklistConfig`: the JSON file listing sources and bind output options.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import OutputFormat, RpzSoa, SourceDescriptor
from core.errors import ConfigError


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "dns-hole"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "dns-hole"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "dns-hole"
    return Path.home() / ".config" / "dns-hole"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Central application settings.

    Every value can be overridden with a `DNS_HOLE_*` environment variable or
    from a `.env` file (project first, then the per-user config dir).
    """

    model_config = SettingsConfigDict(
        env_prefix="DNS_HOLE_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    config_path: Path = Field(
        default=Path("config.json"),
        description="JSON file with the sources and bind output options.",
    )
    cache_dir: Path = Field(
        default=Path("/tmp/dns-hole"),
        description="Scratch directory for downloaded lists and the zone file.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default="dns-hole/0.1 (+https://local)",
        min_length=1,
        description="User-Agent sent when downloading lists.",
    )
    fetch_max_concurrency: int = Field(
        default=4,
        ge=1,
        le=64,
        description="Maximum number of sources downloaded at the same time.",
    )
    sort_output: bool = Field(
        default=False,
        description="Write domains sorted instead of in first-seen order.",
    )
    log_level: LogLevel = Field(
        default="WARNING",
        description="Root logging level for the CLI (console progress is printed regardless).",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value


def load_settings(**overrides: object) -> AppSettings:
    """Build `AppSettings`, reporting bad env values as `ConfigError`."""

    try:
        return AppSettings(**overrides)
    except ValidationError as exc:
        raise ConfigError(f"Invalid DNS_HOLE_* setting: {exc}") from exc


class BlocklistConfig(BaseModel):
    """The `config.json` contract.

    Field aliases keep the historical camelCase keys of the file.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    sources: list[SourceDescriptor] = Field(default_factory=list)
    zone_db: str = Field(
        ...,
        alias="blackListZoneDB",
        min_length=1,
        description="File name of the generated zone file (inside the cache dir).",
    )
    bind_config_dir: str = Field(
        ...,
        alias="bindConfigDir",
        min_length=1,
        description="Directory where bind reads its configuration.",
    )
    blocked_zone: str = Field(
        ...,
        alias="blockedZone",
        min_length=1,
        description="Zone file every blocked domain is delegated to.",
    )
    output_format: OutputFormat = Field(
        default=OutputFormat.DNS,
        alias="zoneFileType",
        description="dns (zone delegations) or rpz (response policy zone).",
    )
    rpz: RpzSoa = Field(default_factory=RpzSoa)

    @model_validator(mode="after")
    def _unique_source_names(self) -> "BlocklistConfig":
        # Names map to cache files; compare the file stems, case-folded.
        seen: dict[str, str] = {}
        for source in self.sources:
            key = source.cache_stem.lower()
            if key in seen:
                raise ValueError(
                    f"duplicate source name: {source.name!r} "
                    f"(same cache file as {seen[key]!r})"
                )
            seen[key] = source.name
        return self

    @property
    def blocked_zone_path(self) -> str:
        return f"{self.bind_config_dir.rstrip('/')}/{self.blocked_zone}"


def load_blocklist_config(path: Path) -> BlocklistConfig:
    """Read and validate the blocklist configuration.

    Raises `ConfigError` when the file is missing, is not JSON or does not
    match the schema.
    """

    if not path.is_file():
        raise ConfigError(f"Missing config file: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Corrupt config file {path}: {exc}") from exc

    try:
        return BlocklistConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc


def write_blocklist_config(config: BlocklistConfig, path: Path) -> Path:
    """Write `config` as JSON using the file's historical key names."""

    path.parent.mkdir(parents=True, exist_ok=True)
    payload = config.model_dump(mode="json", by_alias=True)
    path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    return path
