"""Shared pytest fixtures and test helpers for catalogctl tests."""

from __future__ import annotations

import json
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
import requests
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from catalogctl.config.settings import CatalogSettings
from catalogctl.infrastructure.catalog import Catalog
from catalogctl.infrastructure.database.engine import init_database
from catalogctl.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep host env vars from leaking into settings; reset telemetry."""
    for var in [v for v in os.environ if v.startswith("CATALOGCTL_")]:
        monkeypatch.delenv(var)
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


def make_settings(root: Path, **overrides: Any) -> CatalogSettings:
    """Settings rooted at *root* with no config file in play."""
    return CatalogSettings.from_cli(root=root, **overrides)


@pytest.fixture(params=["sqlite", "memory"])
def catalog(request: pytest.FixtureRequest, tmp_path: Path) -> Iterator[Catalog]:
    """A catalog on each storage backend.

    Service tests run once per backend; both honour the same contract.
    """
    settings = make_settings(tmp_path, store={"backend": request.param})
    c = Catalog(settings)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def sqlite_catalog(tmp_path: Path) -> Iterator[Catalog]:
    c = Catalog(make_settings(tmp_path))
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def _isolated_catalog(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated catalog.

    Use via ``@pytest.mark.usefixtures("_isolated_catalog")`` on command
    test classes. Tests that need the path can also request ``tmp_path``
    directly (pytest deduplicates: it's the same directory).
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def create_product(catalog: Catalog, name: str = "Widget", quantity: int = 10) -> dict[str, Any]:
    """Create a product via ProductService, asserting success."""
    from catalogctl.services.product import ProductService

    result = ProductService(catalog).create({"name": name, "quantity": quantity})
    assert result.ok, result.error
    return result.data


def append_entry(
    catalog: Catalog, product_id: int, username: str = "alice", review: str = "Nice"
) -> dict[str, Any]:
    """Append a review entry via ReviewService, asserting success."""
    from catalogctl.services.review import ReviewService

    result = ReviewService(catalog).append_entry(product_id, username=username, review=review)
    assert result.ok, result.error
    return result.data


def json_response(status: int, payload: Any = None, *, raw: bytes | None = None) -> requests.Response:
    """Build a ``requests.Response`` carrying a JSON body."""
    resp = requests.Response()
    resp.status_code = status
    resp._content = raw if raw is not None else json.dumps(payload).encode()
    resp.headers["Content-Type"] = "application/json"
    return resp


class FakeSession(requests.Session):
    """Session that answers every request from one canned response and records calls."""

    def __init__(self, response: requests.Response | Exception) -> None:
        super().__init__()
        self._response = response
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:  # type: ignore[override]
        self.calls.append((method, url, kwargs))
        if isinstance(self._response, Exception):
            raise self._response
        return self._response
