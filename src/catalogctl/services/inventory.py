"""InventoryService — read-through to the external Inventory Manager.

The collaborator is stateless and non-transactional; any failure it
reports comes back here as absence and is surfaced as ``NOT_FOUND``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from catalogctl.services.base import BaseService
from catalogctl.services.result import ErrorCode, ServiceResult
from catalogctl.services.telemetry import traced

if TYPE_CHECKING:
    from catalogctl.domain.models import InventoryRecord


def _describe(record: InventoryRecord) -> dict[str, Any]:
    data = record.model_dump(mode="json")
    data["location"] = f"/inventory/{record.product_id}"
    return data


class InventoryService(BaseService):
    """Stock lookups and purchases for a product id."""

    @traced
    def lookup(self, product_id: int) -> ServiceResult:
        op = "get_inventory"
        record = self._catalog.inventory.lookup(product_id)
        if record is None:
            return ServiceResult.failure(
                op,
                ErrorCode.NOT_FOUND,
                f"No inventory record for product: {product_id}",
                product_id=product_id,
            )
        return ServiceResult(ok=True, op=op, data=_describe(record))

    @traced
    def purchase(self, product_id: int, quantity: int) -> ServiceResult:
        """Record a purchase of *quantity* units, decrementing stock upstream."""
        op = "record_purchase"
        if quantity < 1:
            return ServiceResult.failure(
                op,
                ErrorCode.VALIDATION_FAILED,
                f"quantity must be >= 1, got {quantity}",
            )
        record = self._catalog.inventory.record_purchase(product_id, quantity)
        if record is None:
            return ServiceResult.failure(
                op,
                ErrorCode.NOT_FOUND,
                f"Purchase not recorded for product: {product_id}",
                product_id=product_id,
            )
        return ServiceResult(ok=True, op=op, data=_describe(record))
