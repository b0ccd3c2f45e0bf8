"""Tests for gitlab_servers.cli.main — the click application."""
from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from gitlab_servers.cli.main import EXIT_PERSISTENCE, EXIT_REJECTED, cli
from gitlab_servers.servers import ServerProfile, ServerRegistry
from gitlab_servers.storage import FileStore, MemoryStore


# ===========================================================================
# Helpers
# ===========================================================================


def _make_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "servers.yml"


def _invoke(store_path: Path, *args: str):
    return _make_runner().invoke(cli, ["--store", str(store_path), *args])


def _names(store_path: Path) -> list[str]:
    return [s.name for s in FileStore(store_path).load()]


# ===========================================================================
# version / help
# ===========================================================================


class TestVersionCommand:
    def test_version_output(self, expected_version: str) -> None:
        result = _make_runner().invoke(cli, ["version"])
        assert result.exit_code == 0
        assert expected_version in result.output

    def test_help_lists_commands(self) -> None:
        result = _make_runner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("add", "update", "remove", "configure", "list", "items", "show"):
            assert command in result.output


# ===========================================================================
# add
# ===========================================================================


class TestAddCommand:
    def test_adds_server(self, store_path: Path) -> None:
        result = _invoke(store_path, "add", "corp", "--url", "https://git.corp")
        assert result.exit_code == 0
        assert "Added corp" in result.output
        (server,) = FileStore(store_path).load()
        assert server == ServerProfile(name="corp", server_url="https://git.corp")

    def test_default_url(self, store_path: Path) -> None:
        _invoke(store_path, "add", "gitlab")
        assert FileStore(store_path).load()[0].server_url == "https://gitlab.com"

    def test_flags(self, store_path: Path) -> None:
        _invoke(store_path, "add", "corp", "--manage-web-hooks", "--credentials-id", "tok")
        server = FileStore(store_path).load()[0]
        assert server.manage_web_hooks is True
        assert server.credentials_id == "tok"

    def test_duplicate_is_rejected(self, store_path: Path) -> None:
        _invoke(store_path, "add", "corp")
        result = _invoke(store_path, "add", "corp", "--url", "https://other")
        assert result.exit_code == EXIT_REJECTED
        assert "already registered" in result.output
        assert FileStore(store_path).load()[0].server_url == "https://gitlab.com"

    def test_store_from_environment(self, store_path: Path) -> None:
        result = _make_runner().invoke(cli, ["add", "corp"], env={"GITLAB_SERVERS_FILE": str(store_path)})
        assert result.exit_code == 0
        assert _names(store_path) == ["corp"]


# ===========================================================================
# update / remove
# ===========================================================================


class TestUpdateCommand:
    def test_updates_url_and_keeps_position(self, store_path: Path) -> None:
        _invoke(store_path, "add", "a")
        _invoke(store_path, "add", "b")
        result = _invoke(store_path, "update", "a", "--url", "https://new")
        assert result.exit_code == 0
        servers = FileStore(store_path).load()
        assert [s.name for s in servers] == ["a", "b"]
        assert servers[0].server_url == "https://new"

    def test_keeps_fields_not_given(self, store_path: Path) -> None:
        _invoke(store_path, "add", "a", "--credentials-id", "tok")
        _invoke(store_path, "update", "a", "--url", "https://new")
        assert FileStore(store_path).load()[0].credentials_id == "tok"

    def test_unknown_name_is_rejected(self, store_path: Path) -> None:
        result = _invoke(store_path, "update", "missing", "--url", "https://new")
        assert result.exit_code == EXIT_REJECTED
        assert "not registered" in result.output
        assert not store_path.exists()


class TestRemoveCommand:
    def test_removes_server(self, store_path: Path) -> None:
        _invoke(store_path, "add", "a")
        _invoke(store_path, "add", "b")
        result = _invoke(store_path, "remove", "a")
        assert result.exit_code == 0
        assert _names(store_path) == ["b"]

    def test_unknown_name_is_rejected(self, store_path: Path) -> None:
        _invoke(store_path, "add", "a")
        result = _invoke(store_path, "remove", "missing")
        assert result.exit_code == EXIT_REJECTED
        assert _names(store_path) == ["a"]


# ===========================================================================
# configure
# ===========================================================================


class TestConfigureCommand:
    def test_replaces_and_reports_duplicates(self, store_path: Path, tmp_path: Path) -> None:
        _invoke(store_path, "add", "old")
        source = tmp_path / "incoming.yml"
        source.write_text(
            "servers:\n"
            "  - name: x\n"
            "    server_url: https://first\n"
            "  - name: y\n"
            "  - name: x\n"
            "    server_url: https://second\n",
            encoding="utf-8",
        )
        result = _invoke(store_path, "configure", str(source))
        assert result.exit_code == 0
        assert "Configured" in result.output
        assert "Dropped" in result.output
        servers = FileStore(store_path).load()
        assert [s.name for s in servers] == ["x", "y"]
        assert servers[0].server_url == "https://first"

    def test_accepts_json(self, store_path: Path, tmp_path: Path) -> None:
        source = tmp_path / "incoming.json"
        source.write_text('{"servers": [{"name": "j", "serverUrl": "https://json"}]}', encoding="utf-8")
        result = _invoke(store_path, "configure", str(source))
        assert result.exit_code == 0
        assert FileStore(store_path).load()[0].server_url == "https://json"

    def test_missing_file(self, store_path: Path, tmp_path: Path) -> None:
        result = _invoke(store_path, "configure", str(tmp_path / "absent.yml"))
        assert result.exit_code == EXIT_REJECTED
        assert "File not found" in result.output

    def test_malformed_file(self, store_path: Path, tmp_path: Path) -> None:
        source = tmp_path / "bad.yml"
        source.write_text("servers: [unclosed\n", encoding="utf-8")
        result = _invoke(store_path, "configure", str(source))
        assert result.exit_code == EXIT_REJECTED


# ===========================================================================
# list / items / show
# ===========================================================================


class TestReadCommands:
    def test_list_empty(self, store_path: Path) -> None:
        result = _invoke(store_path, "list")
        assert result.exit_code == 0
        assert "No servers registered" in result.output

    def test_list_shows_names(self, store_path: Path) -> None:
        _invoke(store_path, "add", "corp", "--url", "https://git.corp")
        result = _invoke(store_path, "list")
        assert result.exit_code == 0
        assert "corp" in result.output

    def test_items_uses_url_for_blank_name(self, store_path: Path) -> None:
        FileStore(store_path).save([ServerProfile(name="", server_url="https://blank")])
        result = _invoke(store_path, "items")
        assert result.exit_code == 0
        assert result.output.count("https://blank") == 2

    def test_show_yaml(self, store_path: Path) -> None:
        _invoke(store_path, "add", "corp", "--url", "https://git.corp")
        result = _invoke(store_path, "show", "corp")
        assert result.exit_code == 0
        assert "https://git.corp" in result.output

    def test_show_json(self, store_path: Path) -> None:
        _invoke(store_path, "add", "corp")
        result = _invoke(store_path, "show", "corp", "--format", "json")
        assert result.exit_code == 0
        assert '"name"' in result.output

    def test_show_missing(self, store_path: Path) -> None:
        result = _invoke(store_path, "show", "missing")
        assert result.exit_code == EXIT_REJECTED


# ===========================================================================
# Error handling and injection
# ===========================================================================


class TestErrors:
    def test_unreadable_store_exits_with_persistence_code(self, store_path: Path) -> None:
        store_path.write_text("servers: [unclosed\n", encoding="utf-8")
        result = _invoke(store_path, "list")
        assert result.exit_code == EXIT_PERSISTENCE

    def test_undecodable_store_exits_with_persistence_code(self, store_path: Path) -> None:
        store_path.write_bytes(b"\xff\xfe")
        result = _invoke(store_path, "list")
        assert result.exit_code == EXIT_PERSISTENCE

    def test_failed_save_exits_with_persistence_code(self) -> None:
        registry = ServerRegistry(MemoryStore(fail_on_save=True))
        result = _make_runner().invoke(cli, ["add", "corp"], obj={"registry": registry})
        assert result.exit_code == EXIT_PERSISTENCE
        assert "corp" not in registry

    def test_injected_registry_is_used(self) -> None:
        registry = ServerRegistry(MemoryStore())
        result = _make_runner().invoke(cli, ["add", "corp"], obj={"registry": registry})
        assert result.exit_code == 0
        assert registry.server_names() == ("corp",)

    def test_verbose_flag(self, store_path: Path) -> None:
        result = _invoke(store_path, "--verbose", "list")
        assert result.exit_code == 0
