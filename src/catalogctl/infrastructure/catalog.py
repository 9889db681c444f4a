"""Catalog — owner of the stores and the inventory client handle.

The Catalog is the single dependency injected into every service. It
builds one :class:`~catalogctl.infrastructure.store.VersionedStore` per
resource type for the configured backend, and holds the
``requests.Session`` used by the inventory client. :meth:`close`
releases both.

There is no cross-resource transaction here: each store mutates its own
entities independently.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import TYPE_CHECKING

import requests

from catalogctl.domain.models import Product, Review
from catalogctl.infrastructure.database.engine import init_database
from catalogctl.infrastructure.database.schema import products, reviews
from catalogctl.infrastructure.inventory import InventoryClient
from catalogctl.infrastructure.memory import MemoryVersionedStore
from catalogctl.infrastructure.store import SqlVersionedStore, VersionedStore

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from catalogctl.config.settings import CatalogSettings

logger = logging.getLogger(__name__)


def new_review_id() -> str:
    """Opaque review id: 24 lowercase hex chars."""
    return uuid.uuid4().hex[:24]


class Catalog:
    """Repository entry point for services.

    Args:
        settings: Resolved settings; ``store`` and ``inventory`` sections
            decide the backend and the collaborator endpoint.
        session: HTTP session for the inventory client. When omitted, the
            Catalog creates one and closes it in :meth:`close`; a passed-in
            session stays owned by the caller.
    """

    def __init__(
        self,
        settings: CatalogSettings,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._engine: Engine | None = None
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

        store_cfg = settings.store
        if store_cfg.backend == "memory":
            self.products: VersionedStore[Product] = MemoryVersionedStore(Product, name="products")
            self.reviews: VersionedStore[Review] = MemoryVersionedStore(
                Review,
                name="reviews",
                id_factory=new_review_id,
                unique=("product_id",),
                immutable=("product_id",),
            )
        else:
            self._engine = init_database(
                settings.root,
                db_path=Path(store_cfg.path),
                busy_timeout=store_cfg.busy_timeout,
            )
            self.products = SqlVersionedStore(self._engine, products, Product)
            self.reviews = SqlVersionedStore(
                self._engine,
                reviews,
                Review,
                id_factory=new_review_id,
                immutable=("product_id",),
                order_by="product_id",
            )
        logger.debug("Catalog opened with %s backend at %s", store_cfg.backend, settings.root)

        self.inventory = InventoryClient(
            self._session,
            settings.inventory.base_url,
            timeout=settings.inventory.timeout,
        )

    @property
    def root(self) -> Path:
        return self._settings.root

    @property
    def settings(self) -> CatalogSettings:
        return self._settings

    @property
    def engine(self) -> Engine | None:
        """The SQLAlchemy engine, or None for the memory backend."""
        return self._engine

    def close(self) -> None:
        """Dispose the engine and close the session if this Catalog created it."""
        if self._engine is not None:
            self._engine.dispose()
        if self._owns_session:
            self._session.close()
