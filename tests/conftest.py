from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from core.config import AppSettings


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def settings(cache_dir: Path) -> AppSettings:
    return AppSettings(_env_file=None, cache_dir=cache_dir, fetch_max_concurrency=2)


@pytest.fixture
def write_list(tmp_path: Path) -> Callable[[str, str], Path]:
    lists_dir = tmp_path / "lists"
    lists_dir.mkdir()

    def _write(name: str, text: str) -> Path:
        path = lists_dir / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    def _write(sources: list[dict[str, Any]], **overrides: Any) -> Path:
        data: dict[str, Any] = {
            "sources": sources,
            "blackListZoneDB": "blacklisted.zones",
            "bindConfigDir": "/etc/bind",
            "blockedZone": "blocked.zone",
            "zoneFileType": "dns",
        }
        data.update(overrides)
        path = tmp_path / "config.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def mock_transport() -> httpx.MockTransport:
    """Fake blocklist server.

    - /hosts.txt   -> 200 hosts file
    - /domains.txt -> 200 one-column list
    - /missing.txt -> 404
    - /broken.txt  -> connection error
    """

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/hosts.txt":
            return httpx.Response(
                200,
                text="# remote hosts\n0.0.0.0 remote-ads.example.com\n0.0.0.0 shared.example.com\n",
            )
        if path == "/domains.txt":
            return httpx.Response(200, text="Remote-Tracker.example.net\nshared.example.com\n")
        if path == "/missing.txt":
            return httpx.Response(404, text="not found")
        if path == "/broken.txt":
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(500)

    return httpx.MockTransport(handler)
