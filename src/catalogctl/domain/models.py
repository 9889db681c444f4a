"""Pydantic models for catalog resources.

Products and reviews are versioned resources: ``id`` and ``version`` are
owned by the store, never by the caller. Review entries are value objects
with no identity of their own.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ReviewEntry(BaseModel):
    """A single user's review of a product, contained in a :class:`Review`."""

    model_config = {"frozen": True}

    username: str = Field(min_length=1)
    date: datetime = Field(default_factory=_utcnow)
    review: str = Field(min_length=1)


class Product(BaseModel):
    """A stocked product.

    ``id`` is None until the store assigns one on create.
    """

    model_config = {"frozen": True}

    id: int | None = None
    name: str = Field(min_length=1)
    quantity: int = Field(ge=0)
    version: int = Field(default=1, ge=1)


class Review(BaseModel):
    """The review document for one product.

    INVARIANT: ``entries`` keeps insertion order. The append path only
    ever adds to the end.
    """

    model_config = {"frozen": True}

    id: str | None = None
    product_id: int
    version: int = Field(default=1, ge=1)
    entries: tuple[ReviewEntry, ...] = ()

    def with_entry(self, entry: ReviewEntry) -> Review:
        """Return a copy with *entry* appended after all existing entries."""
        return self.model_copy(update={"entries": (*self.entries, entry)})


class InventoryRecord(BaseModel):
    """Stock level reported by the external Inventory Manager."""

    model_config = {"frozen": True, "populate_by_name": True}

    product_id: int = Field(alias="productId")
    quantity: int
    product_name: str | None = Field(default=None, alias="productName")
    product_category: str | None = Field(default=None, alias="productCategory")


class PurchaseRecord(BaseModel):
    """Request body sent to the Inventory Manager when stock is purchased."""

    model_config = {"frozen": True, "populate_by_name": True}

    product_id: int = Field(alias="productId")
    quantity_purchased: int = Field(gt=0, alias="quantityPurchased")


# ---------------------------------------------------------------------------
# Mutation payloads (validated before any store interaction)
# ---------------------------------------------------------------------------


class ProductCreate(BaseModel):
    """Fields accepted when creating a product. Caller ids/versions are dropped."""

    model_config = {"frozen": True, "extra": "ignore"}

    name: str = Field(min_length=1)
    quantity: int = Field(default=0, ge=0)


class ProductChanges(BaseModel):
    """Partial update for a product; unset fields are left untouched."""

    model_config = {"frozen": True, "extra": "forbid"}

    name: str | None = Field(default=None, min_length=1)
    quantity: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _not_empty(self) -> ProductChanges:
        if self.name is None and self.quantity is None:
            raise ValueError("No fields to update")
        return self

    def provided(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ReviewCreate(BaseModel):
    """Fields accepted when creating a review document."""

    model_config = {"frozen": True, "extra": "ignore"}

    product_id: int
    entries: tuple[ReviewEntry, ...] = ()


class ReviewChanges(BaseModel):
    """Replacement entry list for an explicit review update."""

    model_config = {"frozen": True, "extra": "forbid"}

    entries: tuple[ReviewEntry, ...]
