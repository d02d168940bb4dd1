"""Ports for the local record store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from recordsync.domain.predicates import Predicate
    from recordsync.domain.records import Record


@runtime_checkable
class LocalStore[TEntity](Protocol):
    """Persistence contract the synchronization core depends on.

    Every mutating operation persists before it returns. ``create_many`` may run
    on a background context and commit in intermediate batches.
    """

    async def create(self, record: Record) -> TEntity: ...

    async def create_many(self, records: Sequence[Record]) -> None: ...

    async def search(self, predicate: Predicate | None = None) -> list[TEntity]: ...

    async def update(self, entity: TEntity) -> TEntity: ...

    async def update_many(self, entities: Sequence[TEntity]) -> list[TEntity]: ...

    async def delete(self, entity: TEntity) -> None: ...

    async def delete_many(self, entities: Sequence[TEntity]) -> None: ...


@runtime_checkable
class RecordRepository[TEntity](Protocol):
    """Session-bound repository used inside a unit of work."""

    def add(self, entity: TEntity) -> None: ...

    def find(self, predicate: Predicate | None = None) -> list[TEntity]: ...

    def remove(self, entity: TEntity) -> None: ...
