"""Tests for InventoryService — pass-through to the Inventory Manager."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
import requests

from catalogctl.infrastructure.catalog import Catalog
from catalogctl.services.inventory import InventoryService
from tests.conftest import FakeSession, json_response, make_settings


@pytest.fixture
def make_catalog(tmp_path: Path) -> Iterator[object]:
    opened: list[Catalog] = []

    def _make(session: FakeSession) -> Catalog:
        c = Catalog(
            make_settings(
                tmp_path,
                store={"backend": "memory"},
                inventory={"base_url": "http://inv.test/inventory"},
            ),
            session=session,
        )
        opened.append(c)
        return c

    yield _make
    for c in opened:
        c.close()


class TestLookup:
    def test_found(self, make_catalog) -> None:  # type: ignore[no-untyped-def]
        session = FakeSession(
            json_response(200, {"productId": 3, "quantity": 20, "productCategory": "tools"})
        )
        result = InventoryService(make_catalog(session)).lookup(3)
        assert result.ok
        assert result.op == "get_inventory"
        assert result.data["quantity"] == 20
        assert result.data["product_category"] == "tools"
        assert result.data["location"] == "/inventory/3"

    def test_unavailable_is_not_found(self, make_catalog) -> None:  # type: ignore[no-untyped-def]
        session = FakeSession(requests.ConnectionError("down"))
        result = InventoryService(make_catalog(session)).lookup(3)
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail == {"product_id": 3}


class TestPurchase:
    def test_recorded(self, make_catalog) -> None:  # type: ignore[no-untyped-def]
        session = FakeSession(json_response(200, {"productId": 3, "quantity": 17}))
        result = InventoryService(make_catalog(session)).purchase(3, 3)
        assert result.ok
        assert result.op == "record_purchase"
        assert result.data["quantity"] == 17
        assert session.calls[0][1] == "http://inv.test/inventory/3/purchaseRecord"

    def test_non_positive_quantity_never_sent(self, make_catalog) -> None:  # type: ignore[no-untyped-def]
        session = FakeSession(json_response(200, {"productId": 3, "quantity": 17}))
        result = InventoryService(make_catalog(session)).purchase(3, 0)
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"
        assert session.calls == []

    def test_rejected_upstream(self, make_catalog) -> None:  # type: ignore[no-untyped-def]
        session = FakeSession(json_response(409, {"error": "insufficient stock"}))
        result = InventoryService(make_catalog(session)).purchase(3, 100)
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
