"""Local store persisting :class:`RecordEntity` rows through SQLAlchemy."""

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from recordsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyRecordUnitOfWork
from recordsync.config.sync import DEFAULT_BATCH_COMMIT_SIZE
from recordsync.domain.errors import InitializationError, StorageError
from recordsync.domain.model import RecordEntity
from recordsync.domain.records import DEFAULT_IDENTIFIER_KEY

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterator, Sequence
    from types import TracebackType

    from recordsync.domain.ports.persistence import RecordRepository
    from recordsync.domain.ports.unit_of_work import RecordUnitOfWork
    from recordsync.domain.predicates import Predicate
    from recordsync.domain.records import Record

type UnitOfWorkFactory = Callable[[], RecordUnitOfWork]

log = getLogger(__name__)


class SqlAlchemyLocalStore:
    """Records of one collection persisted in the configured database.

    Foreground operations share one long-lived unit of work and commit after
    every call. ``create_many`` runs on its own unit of work, in a worker thread
    unless ``background`` is disabled, and commits every ``batch_commit_size``
    records. Requires :func:`recordsync.adapters.sqlalchemy.unit_of_work.startup`.
    """

    def __init__(
        self,
        collection: str,
        *,
        identifier_key: str = DEFAULT_IDENTIFIER_KEY,
        required_fields: Collection[str] = (),
        batch_commit_size: int = DEFAULT_BATCH_COMMIT_SIZE,
        unit_of_work_factory: UnitOfWorkFactory | None = None,
        background: bool = True,
    ) -> None:
        if batch_commit_size < 1:
            raise ValueError("batch_commit_size must be positive")
        self.collection = collection
        self.identifier_key = identifier_key
        self.required_fields = tuple(required_fields)
        self.batch_commit_size = batch_commit_size
        self.background = background
        self._unit_of_work_factory: UnitOfWorkFactory = unit_of_work_factory or partial(
            SqlAlchemyRecordUnitOfWork, collection
        )
        self._foreground: RecordUnitOfWork | None = None

    # lifecycle ----------------------------------------------------------------

    def open(self) -> SqlAlchemyLocalStore:
        self._unit_of_work()
        return self

    def close(self) -> None:
        if self._foreground is not None:
            self._foreground.__exit__(None, None, None)
            self._foreground = None

    def __enter__(self) -> SqlAlchemyLocalStore:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    # LocalStore ---------------------------------------------------------------

    async def create(self, record: Record) -> RecordEntity:
        entity = self._initialize(record)
        with self._saving("create") as records:
            records.add(entity)
        return entity

    async def create_many(self, records: Sequence[Record]) -> None:
        if not records:
            return
        if self.background:
            await asyncio.to_thread(self._create_batched, list(records))
        else:
            self._create_batched(records)

    async def search(self, predicate: Predicate | None = None) -> list[RecordEntity]:
        with self._saving("search") as records:
            return records.find(predicate)

    async def update(self, entity: RecordEntity) -> RecordEntity:
        with self._saving("update") as records:
            records.add(entity)
        return entity

    async def update_many(self, entities: Sequence[RecordEntity]) -> list[RecordEntity]:
        with self._saving("update") as records:
            for entity in entities:
                records.add(entity)
        return list(entities)

    async def delete(self, entity: RecordEntity) -> None:
        with self._saving("delete") as records:
            records.remove(entity)

    async def delete_many(self, entities: Sequence[RecordEntity]) -> None:
        unit_of_work = self._unit_of_work()
        with self._saving("delete") as records:
            for position, entity in enumerate(entities, start=1):
                records.remove(entity)
                if position % self.batch_commit_size == 0:
                    unit_of_work.commit()

    # internals ----------------------------------------------------------------

    def _initialize(self, record: Record) -> RecordEntity:
        return RecordEntity.from_record(
            record,
            collection=self.collection,
            identifier_key=self.identifier_key,
            required_fields=self.required_fields,
        )

    def _unit_of_work(self) -> RecordUnitOfWork:
        if self._foreground is None:
            unit_of_work = self._unit_of_work_factory()
            unit_of_work.__enter__()
            self._foreground = unit_of_work
        return self._foreground

    @contextmanager
    def _saving(self, action: str) -> Iterator[RecordRepository[RecordEntity]]:
        unit_of_work = self._unit_of_work()
        try:
            yield unit_of_work.repositories.records
            unit_of_work.commit()
        except SQLAlchemyError as exc:
            unit_of_work.rollback()
            msg = f"Failed to {action} records of {self.collection!r}"
            raise StorageError(msg, original=exc) from exc

    def _create_batched(self, records: Sequence[Record]) -> None:
        created = skipped = 0
        try:
            with self._unit_of_work_factory() as unit_of_work:
                for record in records:
                    try:
                        entity = self._initialize(record)
                    except InitializationError as exc:
                        skipped += 1
                        log.warning("Skipping record for %s: %s", self.collection, exc)
                        continue
                    unit_of_work.repositories.records.add(entity)
                    created += 1
                    if created % self.batch_commit_size == 0:
                        unit_of_work.commit()
                unit_of_work.commit()
        except SQLAlchemyError as exc:
            msg = f"Failed to create records of {self.collection!r}"
            raise StorageError(msg, original=exc) from exc
        log.debug("Created %s records in %s (%s skipped)", created, self.collection, skipped)


if TYPE_CHECKING:
    from recordsync.domain.ports.persistence import LocalStore

    _store_check: LocalStore[RecordEntity] = SqlAlchemyLocalStore("records")
