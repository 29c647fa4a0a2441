"""CLI tests (typer.testing.CliRunner)."""

import json

from typer.testing import CliRunner

from cli.main import app
from core.config import load_blocklist_config
from core.domain.models import OutputFormat

runner = CliRunner()


class TestUpdateCommand:
    def test_writes_zone_file_and_summary(self, write_config, write_list, cache_dir, tmp_path):
        plain = write_list("plain.txt", "a.com\nb.com\na.com\n")
        config_path = write_config([{"url": str(plain), "name": "plain", "format": "one-col"}])
        summary_path = tmp_path / "summary.json"

        result = runner.invoke(
            app,
            [
                "update",
                "--config", str(config_path),
                "--cache-dir", str(cache_dir),
                "--summary-json", str(summary_path),
                "--no-banner",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Success" in result.output
        assert (cache_dir / "blacklisted.zones").read_text(encoding="utf-8").count("zone ") == 2
        summary = json.loads(summary_path.read_text(encoding="utf-8"))
        assert summary["ok"] is True
        assert summary["entries_found"] == 2
        assert summary["entries_seen"] == 3

    def test_format_override(self, write_config, write_list, cache_dir):
        plain = write_list("plain.txt", "a.com\n")
        config_path = write_config([{"url": str(plain), "name": "plain", "format": "one-col"}])

        result = runner.invoke(
            app,
            ["update", "-c", str(config_path), "--cache-dir", str(cache_dir), "--format", "rpz", "--no-banner"],
        )

        assert result.exit_code == 0, result.output
        assert (cache_dir / "blacklisted.zones").read_text(encoding="utf-8").endswith("a.com CNAME .\n")

    def test_missing_config_aborts(self, tmp_path, cache_dir):
        result = runner.invoke(
            app,
            ["update", "--config", str(tmp_path / "none.json"), "--cache-dir", str(cache_dir), "--no-banner"],
        )

        assert result.exit_code == 1
        assert "Missing config file" in result.output
        assert not cache_dir.exists()

    def test_bad_log_level_aborts(self, write_config, cache_dir, monkeypatch):
        monkeypatch.setenv("DNS_HOLE_LOG_LEVEL", "verbose")
        config_path = write_config([])

        result = runner.invoke(
            app,
            ["update", "--config", str(config_path), "--cache-dir", str(cache_dir), "--no-banner"],
        )

        assert result.exit_code == 1
        assert "Invalid DNS_HOLE_" in result.output


class TestSourcesCommand:
    def test_lists_sources(self, write_config):
        config_path = write_config(
            [
                {"url": "https://lists.test/hosts.txt", "name": "remote-hosts", "format": "two-col"},
                {"url": "/srv/lists/mine.txt", "name": "mine", "format": "dnsmasq"},
            ]
        )

        result = runner.invoke(app, ["sources", "--config", str(config_path)])

        assert result.exit_code == 0, result.output
        assert "remote-hosts" in result.output
        assert "dnsmasq" in result.output


class TestInitCommand:
    def test_writes_config_from_prompts(self, tmp_path):
        config_path = tmp_path / "config.json"
        answers = "\n".join(
            [
                "/etc/bind",
                "blocked.zone",
                "db.rpz",
                "rpz",
                "https://lists.test/hosts.txt",
                "hosts",
                "two-col",
            ]
        )

        result = runner.invoke(app, ["init", "--config", str(config_path)], input=answers + "\n")

        assert result.exit_code == 0, result.output
        config = load_blocklist_config(config_path)
        assert config.output_format is OutputFormat.RPZ
        assert config.sources[0].name == "hosts"

    def test_refuses_to_overwrite(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text("{}", encoding="utf-8")

        result = runner.invoke(app, ["init", "--config", str(config_path)])

        assert result.exit_code != 0
        assert config_path.read_text(encoding="utf-8") == "{}"


class TestDoctorCommand:
    def test_offline_checks(self, write_config, cache_dir, monkeypatch):
        monkeypatch.setenv("DNS_HOLE_CACHE_DIR", str(cache_dir))
        config_path = write_config([{"url": "https://lists.test/hosts.txt", "name": "hosts", "format": "two-col"}])

        result = runner.invoke(app, ["doctor", "run", "--config", str(config_path), "--skip-network"])

        assert result.exit_code == 0, result.output
        assert "Zone templates" in result.output
        assert "FAIL" not in result.output
        assert cache_dir.is_dir()
