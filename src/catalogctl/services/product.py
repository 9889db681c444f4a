"""ProductService — versioned product CRUD.

Updates are partial: only the fields the caller supplies change, and
only when the caller's If-Match version is still current.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from catalogctl.domain.models import Product, ProductChanges, ProductCreate
from catalogctl.services.resource import ResourceService
from catalogctl.services.telemetry import traced

if TYPE_CHECKING:
    from catalogctl.infrastructure.store import VersionedStore
    from catalogctl.services.result import ServiceResult


def _apply_changes(current: Product, changes: ProductChanges) -> Product:
    return current.model_copy(update=changes.provided())


class ProductService(ResourceService[Product]):
    """Get, list, create, conditionally update, and delete products."""

    resource = "product"

    @property
    def store(self) -> VersionedStore[Product]:
        return self._catalog.products

    @traced
    def get(self, product_id: int) -> ServiceResult:
        return self._get(product_id)

    @traced
    def list_all(self) -> ServiceResult:
        return self._list()

    @traced
    def create(self, payload: Mapping[str, Any]) -> ServiceResult:
        """Create a product at version 1 from ``{name, quantity}``."""
        return self._create(
            payload,
            ProductCreate,
            lambda p: Product(name=p.name, quantity=p.quantity),
        )

    @traced
    def update(
        self,
        product_id: int,
        *,
        if_match: str | int | None,
        changes: Mapping[str, Any],
    ) -> ServiceResult:
        """Apply *changes* if *if_match* names the current version."""
        return self._update(product_id, if_match, changes, ProductChanges, _apply_changes)

    @traced
    def delete(self, product_id: int) -> ServiceResult:
        """Delete unconditionally once the product exists."""
        return self._delete(product_id)
