"""BaseService — abstract foundation for all catalogctl services.

Every service receives a :class:`Catalog` at construction time. The
Catalog provides the versioned stores and the inventory client; services
translate store outcomes and errors into :class:`ServiceResult`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from catalogctl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from pydantic import ValidationError

    from catalogctl.infrastructure.catalog import Catalog
    from catalogctl.infrastructure.store import StorageFault

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class ProductService(BaseService):
            def get(self, product_id: int) -> ServiceResult:
                product = self._catalog.products.get(product_id)
                ...
    """

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog

    @staticmethod
    def _storage_fault(op: str, exc: StorageFault) -> ServiceResult:
        """Report a persistence failure. Never retried here."""
        logger.warning("%s failed: %s", op, exc)
        return ServiceResult.failure(op, ErrorCode.STORAGE_FAULT, str(exc))

    @staticmethod
    def _validation_failed(op: str, exc: ValidationError | ValueError) -> ServiceResult:
        """Report malformed input, rejected before any store call."""
        errors = getattr(exc, "errors", None)
        if callable(errors):
            message = "; ".join(
                f"{'.'.join(str(p) for p in e['loc']) or 'payload'}: {e['msg']}" for e in errors()
            )
        else:
            message = str(exc)
        return ServiceResult.failure(op, ErrorCode.VALIDATION_FAILED, message)
