"""Unit tests for source fetching (HTTPS via httpx.MockTransport, local copies)."""

import asyncio

import pytest

from core.domain.models import FetchStatus, FormatKind, SourceDescriptor, sanitize_source_name
from core.errors import CacheDirectoryError
from core.services.fetcher import fetch_sources


def _source(url, name, fmt=FormatKind.ONE_COLUMN):
    return SourceDescriptor(url=url, name=name, format=fmt)


class TestSanitizeSourceName:
    def test_replaces_unsafe_characters(self):
        assert sanitize_source_name("Notracking hosts/GitHub") == "Notracking-hosts-GitHub"

    def test_never_empty(self):
        assert sanitize_source_name("///") == "source"


class TestFetchSources:
    def test_remote_and_local_sources(self, settings, cache_dir, write_list, mock_transport):
        local = write_list("mine.txt", "local.example.com\n")
        sources = [
            _source("https://lists.test/hosts.txt", "Remote Hosts", FormatKind.TWO_COLUMN),
            _source(str(local), "mine"),
        ]

        outcomes = asyncio.run(
            fetch_sources(sources, cache_dir=cache_dir, settings=settings, http_transport=mock_transport)
        )

        assert [o.status for o in outcomes] == [FetchStatus.SUCCESS, FetchStatus.SUCCESS]
        remote_file, local_file = outcomes[0].file, outcomes[1].file
        assert remote_file.path == cache_dir / "Remote-Hosts.txt"
        assert remote_file.format is FormatKind.TWO_COLUMN
        assert "remote-ads.example.com" in remote_file.path.read_text(encoding="utf-8")
        assert local_file.path == cache_dir / "mine.txt"
        assert local_file.path.read_text(encoding="utf-8") == "local.example.com\n"

    def test_failures_are_isolated_and_order_is_kept(self, settings, cache_dir, tmp_path, mock_transport):
        sources = [
            _source("https://lists.test/missing.txt", "missing"),
            _source("https://lists.test/domains.txt", "domains"),
            _source("https://lists.test/broken.txt", "broken"),
            _source(str(tmp_path / "nope.txt"), "nope"),
            _source("http://lists.test/domains.txt", "plain-http"),
        ]

        outcomes = asyncio.run(
            fetch_sources(sources, cache_dir=cache_dir, settings=settings, http_transport=mock_transport)
        )

        assert [o.source.name for o in outcomes] == ["missing", "domains", "broken", "nope", "plain-http"]
        assert [o.ok for o in outcomes] == [False, True, False, False, False]
        assert "404" in outcomes[0].error
        assert outcomes[0].file is None
        assert not (cache_dir / "missing.txt").exists()
        assert not (cache_dir / "broken.txt").exists()

    def test_uppercase_scheme_is_remote(self, settings, cache_dir, mock_transport):
        outcomes = asyncio.run(
            fetch_sources(
                [_source("HTTPS://lists.test/domains.txt", "upper")],
                cache_dir=cache_dir,
                settings=settings,
                http_transport=mock_transport,
            )
        )
        assert outcomes[0].ok

    def test_unusable_cache_dir_is_fatal(self, settings, tmp_path, mock_transport):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(CacheDirectoryError):
            asyncio.run(
                fetch_sources(
                    [_source("https://lists.test/domains.txt", "d")],
                    cache_dir=blocker,
                    settings=settings,
                    http_transport=mock_transport,
                )
            )

    def test_sources_sharing_a_cache_file_keep_their_own_contents(self, settings, cache_dir, write_list):
        first = write_list("first.txt", "first-only.example.com\n")
        second = write_list("second.txt", "second-only.example.com\n")
        sources = [_source(str(first), "ads list"), _source(str(second), "ads/list")]

        outcomes = asyncio.run(fetch_sources(sources, cache_dir=cache_dir, settings=settings))

        assert [o.ok for o in outcomes] == [True, False]
        assert "already used by 'ads list'" in outcomes[1].error
        assert outcomes[0].file.path.read_text(encoding="utf-8") == "first-only.example.com\n"

    def test_no_sources(self, settings, cache_dir):
        assert asyncio.run(fetch_sources([], cache_dir=cache_dir, settings=settings)) == []
        assert cache_dir.is_dir()


class TestTransports:
    def test_transports_satisfy_protocol(self):
        import httpx

        from adapters.sources import HttpsSourceTransport, LocalCopyTransport
        from core.interfaces.transport import SourceTransport

        assert isinstance(LocalCopyTransport(), SourceTransport)
        assert isinstance(HttpsSourceTransport(httpx.AsyncClient()), SourceTransport)

    def test_download_writes_run_in_worker_threads(self, monkeypatch, settings, cache_dir, mock_transport):
        offloaded = []
        real_to_thread = asyncio.to_thread

        async def recording_to_thread(func, *args, **kwargs):
            offloaded.append(getattr(func, "__name__", ""))
            return await real_to_thread(func, *args, **kwargs)

        monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)

        outcomes = asyncio.run(
            fetch_sources(
                [_source("https://lists.test/domains.txt", "domains")],
                cache_dir=cache_dir,
                settings=settings,
                http_transport=mock_transport,
            )
        )

        assert outcomes[0].ok
        assert "write" in offloaded
        assert offloaded[-1] == "close"
