"""Tests for catalog resource models and mutation payloads."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from catalogctl.domain.models import (
    InventoryRecord,
    Product,
    ProductChanges,
    ProductCreate,
    PurchaseRecord,
    Review,
    ReviewChanges,
    ReviewCreate,
    ReviewEntry,
)


class TestProduct:
    def test_defaults(self) -> None:
        p = Product(name="Widget", quantity=10)
        assert p.id is None
        assert p.version == 1

    def test_negative_quantity_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Product(name="Widget", quantity=-1)

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Product(name="", quantity=1)

    def test_frozen(self) -> None:
        p = Product(name="Widget", quantity=10)
        with pytest.raises(ValidationError):
            p.quantity = 3  # type: ignore[misc]


class TestReviewEntry:
    def test_date_defaults_to_now_utc(self) -> None:
        before = datetime.now(UTC)
        entry = ReviewEntry(username="alice", review="Nice")
        assert entry.date >= before
        assert entry.date.tzinfo is not None

    @pytest.mark.parametrize("field", ["username", "review"])
    def test_blank_fields_rejected(self, field: str) -> None:
        data = {"username": "alice", "review": "Nice", field: ""}
        with pytest.raises(ValidationError):
            ReviewEntry.model_validate(data)


class TestReview:
    def test_with_entry_appends_at_end(self) -> None:
        first = ReviewEntry(username="alice", review="one")
        second = ReviewEntry(username="bob", review="two")
        review = Review(product_id=7, entries=(first,))
        updated = review.with_entry(second)
        assert [e.username for e in updated.entries] == ["alice", "bob"]
        # the original is untouched
        assert len(review.entries) == 1

    def test_entries_parse_from_dicts(self) -> None:
        review = Review.model_validate(
            {
                "product_id": 7,
                "entries": [{"username": "alice", "review": "ok", "date": "2024-01-01T00:00:00Z"}],
            }
        )
        assert review.entries[0].date == datetime(2024, 1, 1, tzinfo=UTC)


class TestInventoryWireNames:
    def test_record_reads_camel_case(self) -> None:
        record = InventoryRecord.model_validate(
            {"productId": 5, "quantity": 3, "productName": "Bolt", "productCategory": "hw"}
        )
        assert record.product_id == 5
        assert record.product_name == "Bolt"

    def test_record_optional_fields(self) -> None:
        record = InventoryRecord.model_validate({"productId": 5, "quantity": 0})
        assert record.product_category is None

    def test_purchase_dumps_camel_case(self) -> None:
        body = PurchaseRecord(product_id=5, quantity_purchased=2).model_dump(by_alias=True)
        assert body == {"productId": 5, "quantityPurchased": 2}

    def test_purchase_requires_positive_quantity(self) -> None:
        with pytest.raises(ValidationError):
            PurchaseRecord(product_id=5, quantity_purchased=0)


class TestPayloads:
    def test_create_ignores_caller_id_and_version(self) -> None:
        payload = ProductCreate.model_validate({"name": "W", "quantity": 1, "id": 9, "version": 4})
        assert payload.model_dump() == {"name": "W", "quantity": 1}

    def test_changes_requires_a_field(self) -> None:
        with pytest.raises(ValidationError, match="No fields to update"):
            ProductChanges.model_validate({})

    def test_changes_rejects_unknown_fields(self) -> None:
        with pytest.raises(ValidationError):
            ProductChanges.model_validate({"quantity": 1, "version": 3})

    def test_changes_provided_omits_unset(self) -> None:
        assert ProductChanges(quantity=7).provided() == {"quantity": 7}

    def test_review_create_defaults_to_no_entries(self) -> None:
        assert ReviewCreate(product_id=1).entries == ()

    def test_review_changes_rejects_product_id(self) -> None:
        with pytest.raises(ValidationError):
            ReviewChanges.model_validate({"entries": [], "product_id": 2})
