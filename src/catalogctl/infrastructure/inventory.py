"""HTTP client for the external Inventory Manager.

Stateless pass-through: the client owns no data, only a reference to a
``requests.Session`` handed in by whoever manages its lifecycle (normally
the :class:`~catalogctl.infrastructure.catalog.Catalog`). Every failure,
from connection errors to 4xx/5xx responses to unparseable bodies, is
reported as absence (``None``).
"""

from __future__ import annotations

import logging

import requests
from pydantic import ValidationError

from catalogctl.domain.models import InventoryRecord, PurchaseRecord

logger = logging.getLogger(__name__)


class InventoryClient:
    """Look up and decrement stock through the Inventory Manager REST API."""

    def __init__(self, session: requests.Session, base_url: str, *, timeout: float = 5.0) -> None:
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def lookup(self, product_id: int) -> InventoryRecord | None:
        """``GET {base_url}/{product_id}``."""
        url = f"{self._base_url}/{product_id}"
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
            return InventoryRecord.model_validate(response.json())
        except (requests.RequestException, ValueError, ValidationError) as exc:
            logger.warning("Inventory lookup for product %s failed: %s", product_id, exc)
            return None

    def record_purchase(self, product_id: int, quantity: int) -> InventoryRecord | None:
        """``POST {base_url}/{product_id}/purchaseRecord``."""
        url = f"{self._base_url}/{product_id}/purchaseRecord"
        body = PurchaseRecord(product_id=product_id, quantity_purchased=quantity)
        try:
            response = self._session.post(
                url,
                json=body.model_dump(by_alias=True),
                timeout=self._timeout,
            )
            response.raise_for_status()
            return InventoryRecord.model_validate(response.json())
        except (requests.RequestException, ValueError, ValidationError) as exc:
            logger.warning("Inventory purchase for product %s failed: %s", product_id, exc)
            return None
