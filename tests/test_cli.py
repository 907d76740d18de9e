"""Tests for the hostpage CLI."""

from __future__ import annotations

import functools
import json

import pytest
from typer.testing import CliRunner

from cli.main import app
from hostpage.config import ConfigError
from hostpage.publish import PublishError, run_once
from hostpage.snapshot import SnapshotError, SnapshotStore

runner = CliRunner()


@pytest.fixture
def cli_env(tmp_path, monkeypatch, web01):
    """Point the CLI at a temp snapshot dir and a fixed set of host facts."""
    monkeypatch.setattr("hostpage.config.settings.snapshot_dir", tmp_path / "snapshots")
    monkeypatch.setattr("hostpage.config.settings.confluence_base_url", "https://wiki.example.com")
    monkeypatch.setattr("hostpage.config.settings.confluence_token", "secret-token")
    monkeypatch.setattr("hostpage.config.settings.parent_page_id", "100")
    monkeypatch.setattr("hostpage.config.settings.page_labels", ["custom_tag", "auto_generated"])
    monkeypatch.setattr("hostpage.config.settings.force_upload", False)
    monkeypatch.setattr("cli.main.collect_facts", lambda: web01)
    monkeypatch.setattr("cli.commands.snapshot.local_hostname", lambda: "web01")
    return tmp_path / "snapshots"


@pytest.fixture
def with_fake_client(monkeypatch, fake_confluence):
    monkeypatch.setattr(
        "cli.main.run_once",
        functools.partial(run_once, client_factory=lambda s: fake_confluence),
    )
    return fake_confluence


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------

class TestRun:
    def test_publishes_then_skips(self, cli_env, with_fake_client) -> None:
        first = runner.invoke(app, ["run"])
        assert first.exit_code == 0, first.output
        assert "Page created" in first.output
        assert "custom_tag, auto_generated" in first.output

        second = runner.invoke(app, ["run"])
        assert second.exit_code == 0
        assert "unchanged" in second.output
        assert len(with_fake_client.remote_calls("list_children")) == 1

    def test_force_flag_updates(self, cli_env, with_fake_client) -> None:
        runner.invoke(app, ["run"])
        result = runner.invoke(app, ["run", "--force"])
        assert result.exit_code == 0
        assert "Page updated" in result.output

    def test_dry_run(self, cli_env, with_fake_client) -> None:
        result = runner.invoke(app, ["run", "--dry-run"])
        assert result.exit_code == 0
        assert "dry run" in result.output
        assert with_fake_client.calls == []

    def test_parent_override(self, cli_env, with_fake_client) -> None:
        with_fake_client.parent_id = "555"
        result = runner.invoke(app, ["run", "--parent-id", "555"])
        assert result.exit_code == 0
        assert with_fake_client.remote_calls("create_page") == [("create_page", "web01", "555")]

    def test_config_error_exit_code(self, cli_env, monkeypatch) -> None:
        monkeypatch.setattr("hostpage.config.settings.confluence_token", "")
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 2
        assert "CONFLUENCE_TOKEN" in result.output

    def test_publish_error_exit_code(self, cli_env, with_fake_client) -> None:
        with_fake_client.no_id = True
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 1
        assert "no page ID" in result.output

    def test_failed_labels_print_retry_hint(self, cli_env, with_fake_client) -> None:
        with_fake_client.failing_labels = {"custom_tag"}
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 0, result.output
        assert "Labels not added: custom_tag" in result.output
        assert "run --force" in result.output
        assert "snapshot reset" in result.output

    def test_corrupt_live_snapshot_exit_code(self, cli_env, with_fake_client) -> None:
        cli_env.mkdir(parents=True)
        (cli_env / "web01.live.txt").write_bytes(b"\xff\xfe\x00bad")
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 3
        assert "snapshot error" in result.output
        assert with_fake_client.calls == []

    def test_malformed_timeout_exit_code(self, cli_env, monkeypatch, with_fake_client) -> None:
        monkeypatch.setattr("hostpage.config.settings.request_timeout", None)
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 2
        assert "REQUEST_TIMEOUT" in result.output

        facts = runner.invoke(app, ["facts", "--json"])
        assert facts.exit_code == 0

    @pytest.mark.parametrize(
        "error, code",
        [
            (PublishError("boom"), 1),
            (ConfigError("missing"), 2),
            (SnapshotError("disk full"), 3),
        ],
    )
    def test_exit_codes(self, cli_env, monkeypatch, error, code) -> None:
        def failing(*args, **kwargs):
            raise error

        monkeypatch.setattr("cli.main.run_once", failing)
        result = runner.invoke(app, ["run"])
        assert result.exit_code == code


# ---------------------------------------------------------------------------
# facts / render
# ---------------------------------------------------------------------------

class TestFactsAndRender:
    def test_facts_json(self, cli_env) -> None:
        result = runner.invoke(app, ["facts", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["hostname"] == "web01"
        assert data["cpu_cores"] == 4

    def test_facts_table(self, cli_env) -> None:
        result = runner.invoke(app, ["facts"])
        assert result.exit_code == 0
        assert "memory_gb" in result.output
        assert "10.0.0.15" in result.output

    def test_render(self, cli_env) -> None:
        result = runner.invoke(app, ["render"])
        assert result.exit_code == 0
        assert "<tr><th>Hostname</th><td>web01</td></tr>" in result.output


# ---------------------------------------------------------------------------
# snapshot
# ---------------------------------------------------------------------------

class TestSnapshotCommands:
    def test_show_without_snapshot(self, cli_env) -> None:
        result = runner.invoke(app, ["snapshot", "show"])
        assert result.exit_code == 0
        assert "No live snapshot" in result.output

    def test_show_after_publish(self, cli_env, with_fake_client) -> None:
        runner.invoke(app, ["run"])
        result = runner.invoke(app, ["snapshot", "show"])
        assert result.exit_code == 0
        assert "<td>web01</td>" in result.output

    def test_show_pending_for_other_host(self, cli_env) -> None:
        SnapshotStore(cli_env).write_pending("db01", "<table>db01</table>\n")
        result = runner.invoke(app, ["snapshot", "show", "--host", "DB01", "--pending"])
        assert result.exit_code == 0
        assert "<table>db01</table>" in result.output

    def test_reset_forces_next_publish(self, cli_env, with_fake_client) -> None:
        runner.invoke(app, ["run"])
        reset = runner.invoke(app, ["snapshot", "reset"])
        assert reset.exit_code == 0
        assert "removed" in reset.output

        again = runner.invoke(app, ["run"])
        assert again.exit_code == 0
        assert "Page updated" in again.output
