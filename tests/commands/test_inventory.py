"""Tests for the inventory command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import requests
from click.testing import CliRunner

from catalogctl.cli import cli
from tests.conftest import FakeSession, json_response


def _serve(monkeypatch: pytest.MonkeyPatch, response: requests.Response | Exception) -> FakeSession:
    session = FakeSession(response)
    monkeypatch.setattr("catalogctl.infrastructure.catalog.requests.Session", lambda: session)
    return session


@pytest.mark.usefixtures("_isolated_catalog")
class TestInventoryCommands:
    def test_get(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        session = _serve(monkeypatch, json_response(200, {"productId": 2, "quantity": 5}))
        result = cli_runner.invoke(cli, ["--json", "inventory", "get", "2"])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["quantity"] == 5
        assert session.calls[0][1] == "http://localhost:8080/inventory/2"

    def test_configured_base_url(
        self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        (tmp_path / "catalogctl.toml").write_text('[inventory]\nbase_url = "http://inv.test/stock"\n')
        session = _serve(monkeypatch, json_response(200, {"productId": 2, "quantity": 5}))
        cli_runner.invoke(cli, ["inventory", "get", "2"])
        assert session.calls[0][1] == "http://inv.test/stock/2"

    def test_purchase(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        session = _serve(monkeypatch, json_response(200, {"productId": 2, "quantity": 3}))
        result = cli_runner.invoke(cli, ["--json", "inventory", "purchase", "2", "--quantity", "2"])
        assert result.exit_code == 0
        assert session.calls[0][2]["json"] == {"productId": 2, "quantityPurchased": 2}

    def test_unavailable(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        _serve(monkeypatch, requests.ConnectionError("down"))
        result = cli_runner.invoke(cli, ["-q", "inventory", "get", "2"])
        assert result.exit_code == 1
        assert "NOT_FOUND" in result.output
