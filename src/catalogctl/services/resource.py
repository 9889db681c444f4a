"""ResourceService — boundary orchestration for versioned resources.

Turns inbound requests into store calls and store outcomes into
ServiceResults, without reinterpreting them:

- ``Applied``         → ok, with the new version as an entity tag
- ``VersionConflict`` → ``VERSION_CONFLICT``
- ``NotFound``        → ``NOT_FOUND``
- ``StorageFault``    → ``STORAGE_FAULT``

Payloads and version tokens are validated before the store is touched.
Subclasses bind the store and the payload models for one resource type.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar, Generic

from pydantic import BaseModel, ValidationError

from catalogctl.domain.versioning import format_etag, parse_etag
from catalogctl.infrastructure.store import (
    Applied,
    Deleted,
    DuplicateEntity,
    NotFound,
    StorageFault,
    T,
    VersionConflict,
)
from catalogctl.services.base import BaseService
from catalogctl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from catalogctl.infrastructure.store import UpdateOutcome, VersionedStore

logger = logging.getLogger(__name__)


class ResourceService(BaseService, Generic[T]):
    """Generic get/list/create/update/delete over one versioned store."""

    #: Singular resource name, used for op names and location paths.
    resource: ClassVar[str]

    @property
    def store(self) -> VersionedStore[T]:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def location(self, entity_id: Any) -> str:
        return f"/{self.resource}/{entity_id}"

    def describe(self, entity: T) -> dict[str, Any]:
        """Boundary form of *entity*: its fields plus etag and location."""
        data = entity.model_dump(mode="json")
        data["etag"] = format_etag(entity.version)  # type: ignore[attr-defined]
        data["location"] = self.location(entity.id)  # type: ignore[attr-defined]
        return data

    def _not_found(self, op: str, entity_id: Any) -> ServiceResult:
        return ServiceResult.failure(
            op,
            ErrorCode.NOT_FOUND,
            f"No {self.resource} found with ID: {entity_id}",
            id=entity_id,
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _get(self, entity_id: Any) -> ServiceResult:
        op = f"get_{self.resource}"
        try:
            entity = self.store.get(entity_id)
        except StorageFault as exc:
            return self._storage_fault(op, exc)
        if entity is None:
            return self._not_found(op, entity_id)
        return ServiceResult(ok=True, op=op, data=self.describe(entity))

    def _list(self) -> ServiceResult:
        op = f"list_{self.resource}s"
        try:
            items = self.store.list_all()
        except StorageFault as exc:
            return self._storage_fault(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"items": [self.describe(e) for e in items], "count": len(items)},
        )

    def _create(
        self,
        payload: Mapping[str, Any] | BaseModel,
        schema: type[BaseModel],
        build: Callable[[Any], T],
    ) -> ServiceResult:
        """Validate *payload* against *schema*, then store ``build(validated)``.

        Any id or version in the payload is ignored; the store assigns both.
        """
        op = f"create_{self.resource}"
        try:
            validated = schema.model_validate(
                payload.model_dump() if isinstance(payload, BaseModel) else dict(payload)
            )
        except ValidationError as exc:
            return self._validation_failed(op, exc)

        try:
            created = self.store.create(build(validated))
        except DuplicateEntity as exc:
            return ServiceResult.failure(op, ErrorCode.ALREADY_EXISTS, str(exc))
        except StorageFault as exc:
            return self._storage_fault(op, exc)

        logger.info("Created %s %s", self.resource, created.id)  # type: ignore[attr-defined]
        return ServiceResult(ok=True, op=op, data=self.describe(created))

    def _update(
        self,
        entity_id: Any,
        if_match: str | int | None,
        changes: Mapping[str, Any] | BaseModel,
        schema: type[BaseModel],
        apply: Callable[[T, Any], T],
    ) -> ServiceResult:
        """Conditionally update *entity_id* at the version named by *if_match*."""
        op = f"update_{self.resource}"
        if if_match is None:
            return ServiceResult.failure(
                op, ErrorCode.VALIDATION_FAILED, "An expected version (If-Match) is required"
            )
        try:
            expected_version = parse_etag(if_match)
            validated = schema.model_validate(
                changes.model_dump() if isinstance(changes, BaseModel) else dict(changes)
            )
        except (ValidationError, ValueError) as exc:
            return self._validation_failed(op, exc)

        try:
            outcome: UpdateOutcome[T] = self.store.conditional_update(
                entity_id,
                expected_version,
                lambda current: apply(current, validated),
            )
        except StorageFault as exc:
            return self._storage_fault(op, exc)

        if isinstance(outcome, Applied):
            return ServiceResult(ok=True, op=op, data=self.describe(outcome.entity))
        if isinstance(outcome, VersionConflict):
            return ServiceResult.failure(
                op,
                ErrorCode.VERSION_CONFLICT,
                f"{self.resource.capitalize()} {entity_id} is no longer at version "
                f"{expected_version}; re-read and retry",
                id=entity_id,
                expected_version=expected_version,
            )
        return self._not_found(op, entity_id)

    def _delete(self, entity_id: Any) -> ServiceResult:
        op = f"delete_{self.resource}"
        try:
            outcome = self.store.delete(entity_id)
        except StorageFault as exc:
            return self._storage_fault(op, exc)
        if isinstance(outcome, Deleted):
            logger.info("Deleted %s %s", self.resource, entity_id)
            return ServiceResult(ok=True, op=op, data={"id": entity_id, "deleted": True})
        assert isinstance(outcome, NotFound)
        return self._not_found(op, entity_id)
