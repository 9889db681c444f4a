"""Tests for the product command group."""

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
class TestProductCommands:
    def test_help_lists_subcommands(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["product", "--help"])
        assert result.exit_code == 0
        for name in ("create", "get", "list", "update", "delete"):
            assert name in result.output

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["product", "--examples"])
        assert result.exit_code == 0
        assert "catalogctl product create" in result.output

    def test_create_and_get(self, cli_runner: CliRunner) -> None:
        code, created = _json(cli_runner, "product", "create", "--name", "Widget", "--quantity", "10")
        assert code == 0
        assert created["data"]["version"] == 1
        pid = str(created["data"]["id"])

        code, fetched = _json(cli_runner, "product", "get", pid)
        assert code == 0
        assert fetched["data"]["name"] == "Widget"

    def test_update_requires_if_match(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["product", "update", "1", "--quantity", "3"])
        assert result.exit_code == 2
        assert "--if-match" in result.output

    def test_stale_update_exits_one(self, cli_runner: CliRunner) -> None:
        _, created = _json(cli_runner, "product", "create", "--name", "Widget", "--quantity", "10")
        pid = str(created["data"]["id"])

        code, updated = _json(
            cli_runner, "product", "update", pid, "--if-match", '"1"', "--quantity", "15"
        )
        assert code == 0
        assert updated["data"]["etag"] == '"2"'

        code, stale = _json(
            cli_runner, "product", "update", pid, "--if-match", '"1"', "--quantity", "3"
        )
        assert code == 1
        assert stale["error"]["code"] == "VERSION_CONFLICT"

    def test_get_missing(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["product", "get", "99"])
        assert result.exit_code == 1
        assert "NOT_FOUND" in result.output

    def test_list_quiet(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["product", "create", "--name", "A"])
        cli_runner.invoke(cli, ["product", "create", "--name", "B"])
        result = cli_runner.invoke(cli, ["-q", "product", "list"])
        assert result.exit_code == 0
        assert result.output.split() == ["1", "2"]

    def test_delete(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["product", "create", "--name", "A"])
        code, deleted = _json(cli_runner, "product", "delete", "1")
        assert code == 0
        assert deleted["data"]["deleted"] is True
        assert cli_runner.invoke(cli, ["product", "delete", "1"]).exit_code == 1

    def test_negative_quantity_rejected(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["product", "create", "--name", "A", "--quantity", "-1"])
        assert result.exit_code == 1
        assert "VALIDATION_FAILED" in result.output
