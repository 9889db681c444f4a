"""Versioned stores — atomic conditional writes keyed by entity id.

A :class:`VersionedStore` persists frozen pydantic entities that carry
``id`` and ``version`` fields. Reads are plain; every mutation is a single
atomic statement, so concurrent writers never lose each other's updates:

- ``create`` assigns the id and stamps version 1.
- ``conditional_update`` writes only while the stored version still
  equals the caller's expected version (compare-and-swap).
- ``delete`` removes the row if it is there.

Expected outcomes (:class:`Applied`, :class:`VersionConflict`,
:class:`NotFound`, :class:`Deleted`) are returned as values. Persistence
failures raise :class:`StorageFault`; the store never retries.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel
from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from catalogctl.domain.versioning import INITIAL_VERSION, VersionCheck, classify, next_version

if TYPE_CHECKING:
    from sqlalchemy import Connection, Row, Table
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)
T_co = TypeVar("T_co", bound=BaseModel, covariant=True)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class StoreError(Exception):
    """Base class for store-level failures."""


class StorageFault(StoreError):
    """The persistence layer failed (I/O error, lock timeout, driver error).

    Never used for "not found" or "stale version"; those are outcomes.
    """


class DuplicateEntity(StoreError):
    """A create collided with a unique constraint other than the id."""


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Applied(Generic[T_co]):
    """The conditional write went through; *entity* is the new stored state."""

    entity: T_co


@dataclass(frozen=True)
class VersionConflict:
    """The stored version no longer equals the expected one.

    Deliberately carries no copy of the current entity.
    """

    entity_id: Any
    expected_version: int


@dataclass(frozen=True)
class NotFound:
    """No entity is stored under *entity_id*."""

    entity_id: Any


@dataclass(frozen=True)
class Deleted:
    """The entity stored under *entity_id* was removed."""

    entity_id: Any


UpdateOutcome = Applied[T] | VersionConflict | NotFound
DeleteOutcome = Deleted | NotFound
Mutator = Callable[[T], T]


# ---------------------------------------------------------------------------
# Capability interface
# ---------------------------------------------------------------------------


@runtime_checkable
class VersionedStore(Protocol[T]):
    """Concurrency-safe storage for versioned entities of one type."""

    def get(self, entity_id: Any) -> T | None: ...

    def list_all(self) -> list[T]: ...

    def find_one(self, field: str, value: Any) -> T | None: ...

    def create(self, entity: T) -> T: ...

    def conditional_update(
        self,
        entity_id: Any,
        expected_version: int,
        mutate: Mutator[T],
    ) -> UpdateOutcome[T]: ...

    def delete(self, entity_id: Any) -> DeleteOutcome: ...


def build_candidate(
    model: type[T],
    current: T,
    mutated: T,
    *,
    expected_version: int,
    immutable: tuple[str, ...] = (),
) -> T:
    """Re-validate *mutated* with id, version and immutable fields pinned.

    The mutator only decides mutable fields; identity and versioning stay
    under store control whatever the mutator returned.
    """
    data = mutated.model_dump()
    data["id"] = current.id  # type: ignore[attr-defined]
    data["version"] = next_version(expected_version)
    for name in immutable:
        data[name] = getattr(current, name)
    return model.model_validate(data)


# ---------------------------------------------------------------------------
# SQL implementation
# ---------------------------------------------------------------------------


@contextmanager
def _storage_errors(op: str, table: str) -> Iterator[None]:
    """Translate driver errors into :class:`StorageFault`."""
    try:
        yield
    except IntegrityError as exc:
        raise DuplicateEntity(f"{op} on {table} violates a unique constraint") from exc
    except SQLAlchemyError as exc:
        logger.warning("Storage failure during %s on %s: %s", op, table, exc)
        raise StorageFault(f"{op} on {table} failed: {exc.__class__.__name__}") from exc


class SqlVersionedStore(Generic[T]):
    """SQLAlchemy Core store for one table.

    Args:
        engine: Engine bound to the catalog database.
        table: Table with ``id`` and ``version`` columns whose remaining
            columns match the model's fields.
        model: Frozen pydantic model for rows of *table*.
        id_factory: Generates ids for tables without a database-assigned
            key. None means the database autoincrements.
        immutable: Fields a mutator can never change after create.
        order_by: Column used by :meth:`list_all`.
    """

    def __init__(
        self,
        engine: Engine,
        table: Table,
        model: type[T],
        *,
        id_factory: Callable[[], Any] | None = None,
        immutable: tuple[str, ...] = (),
        order_by: str = "id",
    ) -> None:
        self._engine = engine
        self._table = table
        self._model = model
        self._id_factory = id_factory
        self._immutable = immutable
        self._order_by = order_by

    @property
    def name(self) -> str:
        return self._table.name

    # ------------------------------------------------------------------
    # Row mapping
    # ------------------------------------------------------------------

    def _to_values(self, entity: T) -> dict[str, Any]:
        return entity.model_dump(mode="json", exclude={"id"})

    def _from_row(self, row: Row[Any]) -> T:
        return self._model.model_validate(dict(row._mapping))

    def _fetch(self, conn: Connection, entity_id: Any) -> Row[Any] | None:
        return conn.execute(select(self._table).where(self._table.c.id == entity_id)).first()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, entity_id: Any) -> T | None:
        with _storage_errors("get", self.name), self._engine.connect() as conn:
            row = self._fetch(conn, entity_id)
        return None if row is None else self._from_row(row)

    def list_all(self) -> list[T]:
        with _storage_errors("list", self.name), self._engine.connect() as conn:
            rows = conn.execute(
                select(self._table).order_by(self._table.c[self._order_by])
            ).fetchall()
        return [self._from_row(r) for r in rows]

    def find_one(self, field: str, value: Any) -> T | None:
        with _storage_errors("find", self.name), self._engine.connect() as conn:
            row = conn.execute(select(self._table).where(self._table.c[field] == value)).first()
        return None if row is None else self._from_row(row)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, entity: T) -> T:
        """Insert *entity* under a fresh id at version 1."""
        values = self._to_values(entity)
        values["version"] = INITIAL_VERSION
        if self._id_factory is not None:
            values["id"] = self._id_factory()

        with _storage_errors("create", self.name), self._engine.begin() as conn:
            result = conn.execute(insert(self._table).values(**values))
            new_id = values["id"] if "id" in values else result.inserted_primary_key[0]

        logger.debug("Created %s id=%s", self.name, new_id)
        return self._model.model_validate(
            {**entity.model_dump(), "id": new_id, "version": INITIAL_VERSION}
        )

    def conditional_update(
        self,
        entity_id: Any,
        expected_version: int,
        mutate: Mutator[T],
    ) -> UpdateOutcome[T]:
        """Apply *mutate* only if the stored version equals *expected_version*.

        The candidate is computed from a plain read, then persisted with a
        single ``UPDATE ... WHERE id = :id AND version = :expected``. If
        that statement touches no row, another writer got there first (or
        the row was deleted) and the attempt is re-classified.
        """
        current = self.get(entity_id)
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
        values = self._to_values(candidate)

        with _storage_errors("update", self.name), self._engine.begin() as conn:
            result = conn.execute(
                update(self._table)
                .where(self._table.c.id == entity_id)
                .where(self._table.c.version == expected_version)
                .values(**values)
            )
            if result.rowcount == 1:
                logger.debug(
                    "Updated %s id=%s to version %s",
                    self.name,
                    entity_id,
                    candidate.version,  # type: ignore[attr-defined]
                )
                return Applied(candidate)
            still_there = self._fetch(conn, entity_id) is not None

        if not still_there:
            return NotFound(entity_id)
        logger.debug("Lost write race on %s id=%s at version %s", self.name, entity_id, expected_version)
        return VersionConflict(entity_id, expected_version)

    def delete(self, entity_id: Any) -> DeleteOutcome:
        with _storage_errors("delete", self.name), self._engine.begin() as conn:
            removed = conn.execute(
                delete(self._table).where(self._table.c.id == entity_id)
            ).rowcount
        if removed == 1:
            logger.debug("Deleted %s id=%s", self.name, entity_id)
            return Deleted(entity_id)
        return NotFound(entity_id)
