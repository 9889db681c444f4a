"""Tests for the review command group."""

from __future__ import annotations

import json
from typing import Any

import pytest
from click.testing import CliRunner

from catalogctl.cli import cli


def _json(cli_runner: CliRunner, *args: str) -> tuple[int, dict[str, Any]]:
    result = cli_runner.invoke(cli, ["--json", *args])
    return result.exit_code, json.loads(result.output)


@pytest.mark.usefixtures("_isolated_catalog")
class TestReviewCommands:
    def test_append_creates_then_extends(self, cli_runner: CliRunner) -> None:
        code, first = _json(cli_runner, "review", "append", "7", "--username", "a", "--text", "x")
        assert code == 0
        assert first["data"]["version"] == 1

        code, second = _json(cli_runner, "review", "append", "7", "--username", "b", "--text", "y")
        assert code == 0
        assert second["data"]["id"] == first["data"]["id"]
        assert [e["review"] for e in second["data"]["entries"]] == ["x", "y"]

    def test_append_with_date(self, cli_runner: CliRunner) -> None:
        code, data = _json(
            cli_runner,
            "review", "append", "1", "--username", "a", "--text", "x",
            "--date", "2024-05-01T12:00:00+00:00",
        )
        assert code == 0
        assert data["data"]["entries"][0]["date"].startswith("2024-05-01T12:00:00")

    def test_append_bad_date(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["review", "append", "1", "--username", "a", "--text", "x", "--date", "soon"]
        )
        assert result.exit_code == 2

    def test_for_product_and_get(self, cli_runner: CliRunner) -> None:
        _, appended = _json(cli_runner, "review", "append", "3", "--username", "a", "--text", "x")
        code, by_product = _json(cli_runner, "review", "for-product", "3")
        assert code == 0
        assert by_product["data"]["id"] == appended["data"]["id"]

        code, fetched = _json(cli_runner, "review", "get", appended["data"]["id"])
        assert code == 0
        assert fetched["data"]["product_id"] == 3

    def test_create_with_entries_and_duplicate(self, cli_runner: CliRunner) -> None:
        code, created = _json(
            cli_runner, "review", "create", "4", "--entry", "alice=Great", "--entry", "bob=Fine"
        )
        assert code == 0
        assert [e["username"] for e in created["data"]["entries"]] == ["alice", "bob"]

        code, dup = _json(cli_runner, "review", "create", "4")
        assert code == 1
        assert dup["error"]["code"] == "ALREADY_EXISTS"

    def test_malformed_entry(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["review", "create", "4", "--entry", "no-separator"])
        assert result.exit_code == 2
        assert "USER=TEXT" in result.output

    def test_update_replaces_entries(self, cli_runner: CliRunner) -> None:
        _, created = _json(cli_runner, "review", "append", "5", "--username", "a", "--text", "x")
        rid = created["data"]["id"]
        code, updated = _json(
            cli_runner, "review", "update", rid, "--if-match", '"1"', "--entry", "mod=clean"
        )
        assert code == 0
        assert updated["data"]["version"] == 2
        assert [e["username"] for e in updated["data"]["entries"]] == ["mod"]

        code, stale = _json(
            cli_runner, "review", "update", rid, "--if-match", '"1"', "--entry", "mod=again"
        )
        assert code == 1
        assert stale["error"]["code"] == "VERSION_CONFLICT"

    def test_list_and_delete(self, cli_runner: CliRunner) -> None:
        _, created = _json(cli_runner, "review", "append", "5", "--username", "a", "--text", "x")
        code, listed = _json(cli_runner, "review", "list")
        assert listed["data"]["count"] == 1

        result = cli_runner.invoke(cli, ["review", "delete", created["data"]["id"]])
        assert result.exit_code == 0
        assert cli_runner.invoke(cli, ["review", "for-product", "5"]).exit_code == 1
