"""Review services — CRUD plus append-only entry aggregation.

:class:`ReviewAggregator` appends one entry to the review of a product
while other writers may be doing the same. Each attempt is either a
single create (first entry for the product) or a single conditional
update at the version just read. A lost race re-reads and tries again,
up to ``reviews.max_append_attempts``; running out raises
:class:`AggregatorBusy` instead of looping forever.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from catalogctl.domain.models import Review, ReviewChanges, ReviewCreate, ReviewEntry
from catalogctl.infrastructure.store import Applied, DuplicateEntity, StorageFault
from catalogctl.services.resource import ResourceService
from catalogctl.services.result import ErrorCode, ServiceResult
from catalogctl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from catalogctl.infrastructure.catalog import Catalog
    from catalogctl.infrastructure.store import VersionedStore

log = structlog.get_logger(__name__)


class AggregatorBusy(Exception):
    """Every append attempt lost a race with another writer."""

    def __init__(self, product_id: int, attempts: int) -> None:
        self.product_id = product_id
        self.attempts = attempts
        super().__init__(
            f"Review for product {product_id} stayed contended after {attempts} attempts"
        )


class ReviewAggregator:
    """Append entries to per-product reviews under contention.

    Args:
        store: Review store; must reject a second review for the same
            ``product_id`` with :class:`DuplicateEntity`.
        max_attempts: Upper bound on read-and-write attempts per append.
        backoff_ms: Linear backoff between attempts (``attempt * backoff_ms``).
    """

    def __init__(
        self,
        store: VersionedStore[Review],
        *,
        max_attempts: int = 5,
        backoff_ms: int = 0,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._store = store
        self._max_attempts = max_attempts
        self._backoff_ms = backoff_ms

    def append(self, product_id: int, entry: ReviewEntry) -> Review:
        """Append *entry* to the end of the review for *product_id*.

        Creates the review (version 1, single entry) when none exists.

        Raises:
            AggregatorBusy: All attempts lost to concurrent writers.
            StorageFault: The store failed; not retried.
        """
        for attempt in range(1, self._max_attempts + 1):
            with trace_span("append_attempt") as span:
                if span:
                    span.annotate("attempt", attempt)
                review = self._attempt(product_id, entry)
            if review is not None:
                if attempt > 1:
                    log.debug("review.append.settled", product_id=product_id, attempts=attempt)
                return review

            log.debug("review.append.retry", product_id=product_id, attempt=attempt)
            if self._backoff_ms and attempt < self._max_attempts:
                time.sleep(attempt * self._backoff_ms / 1000)

        log.warning("review.append.busy", product_id=product_id, attempts=self._max_attempts)
        raise AggregatorBusy(product_id, self._max_attempts)

    def _attempt(self, product_id: int, entry: ReviewEntry) -> Review | None:
        """One read-then-write round. None means another writer got in first."""
        current = self._store.find_one("product_id", product_id)
        if current is None:
            try:
                return self._store.create(Review(product_id=product_id, entries=(entry,)))
            except DuplicateEntity:
                return None

        outcome = self._store.conditional_update(
            current.id,
            current.version,
            lambda review: review.with_entry(entry),
        )
        if isinstance(outcome, Applied):
            return outcome.entity
        # VersionConflict, or NotFound if the review was deleted meanwhile.
        return None


def _replace_entries(current: Review, changes: ReviewChanges) -> Review:
    return current.model_copy(update={"entries": changes.entries})


class ReviewService(ResourceService[Review]):
    """Get, list, create, update, delete reviews, and append entries."""

    resource = "review"

    def __init__(self, catalog: Catalog) -> None:
        super().__init__(catalog)
        cfg = catalog.settings.reviews
        self._aggregator = ReviewAggregator(
            catalog.reviews,
            max_attempts=cfg.max_append_attempts,
            backoff_ms=cfg.retry_backoff_ms,
        )

    @property
    def store(self) -> VersionedStore[Review]:
        return self._catalog.reviews

    @traced
    def get(self, review_id: str) -> ServiceResult:
        return self._get(review_id)

    @traced
    def get_by_product(self, product_id: int) -> ServiceResult:
        op = "get_review_by_product"
        try:
            review = self.store.find_one("product_id", product_id)
        except StorageFault as exc:
            return self._storage_fault(op, exc)
        if review is None:
            return ServiceResult.failure(
                op,
                ErrorCode.NOT_FOUND,
                f"No review found for product: {product_id}",
                product_id=product_id,
            )
        return ServiceResult(ok=True, op=op, data=self.describe(review))

    @traced
    def list_all(self) -> ServiceResult:
        return self._list()

    @traced
    def create(self, payload: Mapping[str, Any]) -> ServiceResult:
        """Create the review document for a product at version 1."""
        return self._create(
            payload,
            ReviewCreate,
            lambda r: Review(product_id=r.product_id, entries=r.entries),
        )

    @traced
    def update(
        self,
        review_id: str,
        *,
        if_match: str | int | None,
        changes: Mapping[str, Any],
    ) -> ServiceResult:
        """Replace the entry list if *if_match* names the current version.

        ``product_id`` stays fixed whatever the payload says.
        """
        return self._update(review_id, if_match, changes, ReviewChanges, _replace_entries)

    @traced
    def delete(self, review_id: str) -> ServiceResult:
        return self._delete(review_id)

    @traced
    def append_entry(
        self,
        product_id: int,
        *,
        username: str,
        review: str,
        date: datetime | None = None,
    ) -> ServiceResult:
        """Append one entry to the review for *product_id*, creating it if needed."""
        op = "append_review_entry"
        fields: dict[str, Any] = {"username": username, "review": review}
        if date is not None:
            fields["date"] = date
        try:
            entry = ReviewEntry.model_validate(fields)
        except ValidationError as exc:
            return self._validation_failed(op, exc)

        try:
            updated = self._aggregator.append(product_id, entry)
        except AggregatorBusy as exc:
            return ServiceResult.failure(
                op,
                ErrorCode.BUSY,
                str(exc),
                product_id=product_id,
                attempts=exc.attempts,
            )
        except StorageFault as exc:
            return self._storage_fault(op, exc)

        return ServiceResult(ok=True, op=op, data=self.describe(updated))
