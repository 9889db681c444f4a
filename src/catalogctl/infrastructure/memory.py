"""In-process versioned store.

Same contract as :class:`~catalogctl.infrastructure.store.SqlVersionedStore`
without a database: each entity id gets its own mutex, and the
check-and-write of a conditional update happens entirely under it.
Used as the ``memory`` backend and as the test double for services.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Generic

from catalogctl.domain.versioning import INITIAL_VERSION, VersionCheck, classify
from catalogctl.infrastructure.store import (
    Applied,
    Deleted,
    DeleteOutcome,
    DuplicateEntity,
    Mutator,
    NotFound,
    T,
    UpdateOutcome,
    VersionConflict,
    build_candidate,
)

logger = logging.getLogger(__name__)


class MemoryVersionedStore(Generic[T]):
    """Dict-backed store with per-id locking.

    Args:
        model: Frozen pydantic model stored here.
        id_factory: Generates ids; defaults to a monotonically increasing
            integer sequence, so deleted ids are never handed out again.
        unique: Fields whose values must be unique across entities.
        immutable: Fields a mutator can never change after create.
    """

    def __init__(
        self,
        model: type[T],
        *,
        name: str | None = None,
        id_factory: Callable[[], Any] | None = None,
        unique: tuple[str, ...] = (),
        immutable: tuple[str, ...] = (),
    ) -> None:
        self._model = model
        self.name = name or model.__name__.lower()
        self._id_factory = id_factory or itertools.count(1).__next__
        self._unique = unique
        self._immutable = immutable
        self._items: dict[Any, T] = {}
        self._registry_lock = threading.Lock()
        self._locks: dict[Any, threading.Lock] = {}

    @contextmanager
    def _locked(self, entity_id: Any) -> Iterator[None]:
        """Hold the mutex for *entity_id*; delete drops it since ids are never reused."""
        with self._registry_lock:
            lock = self._locks.setdefault(entity_id, threading.Lock())
        with lock:
            yield

    def get(self, entity_id: Any) -> T | None:
        return self._items.get(entity_id)

    def list_all(self) -> list[T]:
        with self._registry_lock:
            items = list(self._items.values())
        return items

    def find_one(self, field: str, value: Any) -> T | None:
        for item in self.list_all():
            if getattr(item, field) == value:
                return item
        return None

    def create(self, entity: T) -> T:
        with self._registry_lock:
            for field in self._unique:
                value = getattr(entity, field)
                if any(getattr(e, field) == value for e in self._items.values()):
                    raise DuplicateEntity(f"create on {self.name} violates unique {field}")
            new_id = self._id_factory()
            stored = self._model.model_validate(
                {**entity.model_dump(), "id": new_id, "version": INITIAL_VERSION}
            )
            self._items[new_id] = stored
        logger.debug("Created %s id=%s", self.name, new_id)
        return stored

    def conditional_update(
        self,
        entity_id: Any,
        expected_version: int,
        mutate: Mutator[T],
    ) -> UpdateOutcome[T]:
        with self._locked(entity_id):
            current = self._items.get(entity_id)
            check = classify(expected_version, None if current is None else current.version)  # type: ignore[attr-defined]
            if check is VersionCheck.ABSENT:
                return NotFound(entity_id)
            if check is VersionCheck.MISMATCH:
                logger.debug(
                    "Version conflict on %s id=%s: expected %s",
                    self.name,
                    entity_id,
                    expected_version,
                )
                return VersionConflict(entity_id, expected_version)
            assert current is not None
            candidate = build_candidate(
                self._model,
                current,
                mutate(current),
                expected_version=expected_version,
                immutable=self._immutable,
            )
            with self._registry_lock:
                self._items[entity_id] = candidate
        return Applied(candidate)

    def delete(self, entity_id: Any) -> DeleteOutcome:
        with self._locked(entity_id), self._registry_lock:
            self._locks.pop(entity_id, None)
            if self._items.pop(entity_id, None) is None:
                return NotFound(entity_id)
        logger.debug("Deleted %s id=%s", self.name, entity_id)
        return Deleted(entity_id)
