from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import pytest

from recordsync.adapters.sqlalchemy.local_store import SqlAlchemyLocalStore
from recordsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyRecordUnitOfWork
from recordsync.domain.errors import InitializationError, StorageError
from recordsync.domain.model import RecordEntity, SyncState
from recordsync.domain.predicates import IdentifierEquals, StateIs
from recordsync.domain.remote import RemoteCollection
from recordsync.domain.synchronizer import Synchronizer
from tests.helpers.remote import FakeRemoteStore, routes

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


class CountingUnitOfWork(SqlAlchemyRecordUnitOfWork):
    def __init__(self, collection: str) -> None:
        super().__init__(collection)
        self.commits = 0

    def commit(self) -> None:
        self.commits += 1
        super().commit()


def _stored(factory: Callable[[], SqlAlchemyRecordUnitOfWork]) -> dict[str, RecordEntity]:
    with factory() as uow:
        return {entity.id: entity for entity in uow.repositories.records.find()}


def test_create_persists_entity(
    sqlite_local_store: SqlAlchemyLocalStore,
    sqlite_unit_of_work: Callable[[], SqlAlchemyRecordUnitOfWork],
) -> None:
    entity = asyncio.run(sqlite_local_store.create({"_id": "1", "name": "Ada"}))

    assert entity.state is SyncState.SYNCED
    stored = _stored(sqlite_unit_of_work)
    assert stored["1"].get("name") == "Ada"


def test_create_rejects_records_missing_required_fields(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRecordUnitOfWork],
) -> None:
    store = SqlAlchemyLocalStore(
        "users",
        required_fields=("name",),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    with store, pytest.raises(InitializationError):
        asyncio.run(store.create({"_id": "1"}))

    assert _stored(sqlite_unit_of_work) == {}


def test_create_many_commits_in_batches_and_skips_invalid_records(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRecordUnitOfWork],
    caplog: pytest.LogCaptureFixture,
) -> None:
    _ = sqlite_unit_of_work
    units: list[CountingUnitOfWork] = []

    def factory() -> CountingUnitOfWork:
        unit_of_work = CountingUnitOfWork("users")
        units.append(unit_of_work)
        return unit_of_work

    store = SqlAlchemyLocalStore(
        "users",
        required_fields=("name",),
        batch_commit_size=2,
        unit_of_work_factory=factory,
    )
    records = [
        {"_id": "1", "name": "a"},
        {"_id": "2", "name": "b"},
        {"_id": "3"},
        {"_id": "4", "name": "d"},
        {"_id": "5", "name": "e"},
    ]

    with store, caplog.at_level(logging.WARNING):
        asyncio.run(store.create_many(records))
        found = asyncio.run(store.search())

    assert sorted(entity.id for entity in found) == ["1", "2", "4", "5"]
    foreground, background = units
    assert background.commits == 3
    assert foreground.commits == 1
    assert "Skipping record for users" in caplog.text


def test_create_many_inline_without_background(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRecordUnitOfWork],
) -> None:
    store = SqlAlchemyLocalStore(
        "users",
        unit_of_work_factory=sqlite_unit_of_work,
        background=False,
    )

    with store:
        asyncio.run(store.create_many([{"_id": "1"}, {"name": "draft"}]))

    stored = _stored(sqlite_unit_of_work)
    assert stored["1"].state is SyncState.SYNCED
    assert stored["-1"].state is SyncState.DIRTY


def test_update_persists_local_edits(
    sqlite_local_store: SqlAlchemyLocalStore,
    sqlite_unit_of_work: Callable[[], SqlAlchemyRecordUnitOfWork],
) -> None:
    entity = asyncio.run(sqlite_local_store.create({"_id": "1", "name": "Ada"}))
    entity.set("name", "Grace")
    entity.mark_dirty()

    asyncio.run(sqlite_local_store.update(entity))

    stored = _stored(sqlite_unit_of_work)["1"]
    assert stored.get("name") == "Grace"
    assert stored.state is SyncState.DIRTY
    assert stored.snapshot == {"_id": "1", "name": "Ada"}


def test_update_many_and_search_by_state(sqlite_local_store: SqlAlchemyLocalStore) -> None:
    asyncio.run(sqlite_local_store.create_many([{"_id": str(n)} for n in range(5)]))
    entities = asyncio.run(sqlite_local_store.search())
    for entity in entities[:3]:
        entity.set_synchronized(False)

    asyncio.run(sqlite_local_store.update_many(entities))

    unseen = asyncio.run(sqlite_local_store.search(StateIs(SyncState.UNSEEN)))
    assert len(unseen) == 3


def test_delete_and_delete_many(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRecordUnitOfWork],
) -> None:
    store = SqlAlchemyLocalStore(
        "users",
        unit_of_work_factory=sqlite_unit_of_work,
        batch_commit_size=2,
    )

    with store:
        asyncio.run(store.create_many([{"_id": str(n)} for n in range(5)]))
        (first,) = asyncio.run(store.search(IdentifierEquals("0")))
        asyncio.run(store.delete(first))
        survivors = asyncio.run(store.search())
        asyncio.run(store.delete_many(survivors[:3]))
        remaining = asyncio.run(store.search())

    assert len(remaining) == 1


def test_storage_errors_are_wrapped(sqlite_local_store: SqlAlchemyLocalStore) -> None:
    never_stored = RecordEntity(collection="users", payload={"name": "ghost"})

    with pytest.raises(StorageError) as excinfo:
        asyncio.run(sqlite_local_store.delete(never_stored))

    assert excinfo.value.original is not None
    assert excinfo.value.__cause__ is excinfo.value.original


def test_synchronize_against_sqlite_store(
    sqlite_local_store: SqlAlchemyLocalStore,
    sqlite_unit_of_work: Callable[[], SqlAlchemyRecordUnitOfWork],
) -> None:
    asyncio.run(sqlite_local_store.create({"_id": "firstID", "name": "Luciano"}))
    asyncio.run(sqlite_local_store.create({"name": "secondFN"}))
    asyncio.run(sqlite_local_store.create({"_id": "thirdID", "name": "third"}))
    remote_store = FakeRemoteStore(
        callback=routes(
            {
                ("POST", "users/collection"): [{"_id": "secondID"}],
                ("GET", "users"): [
                    {"_id": "firstID", "name": "Luciano Polit"},
                    {"_id": "secondID", "name": "secondFN"},
                    {"_id": "fourthID", "name": "fourth"},
                ],
            }
        )
    )
    synchronizer = Synchronizer(
        local=sqlite_local_store,
        remote=RemoteCollection(remote_store, "users"),
    )

    result = asyncio.run(synchronizer.synchronize())

    stored = _stored(sqlite_unit_of_work)
    assert sorted(stored) == ["firstID", "fourthID", "secondID"]
    assert stored["firstID"].get("name") == "Luciano Polit"
    assert all(entity.state is SyncState.SYNCED for entity in stored.values())
    assert (result.pushed, result.created, result.deleted) == (1, 1, 1)


@pytest.fixture
def posts_store(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRecordUnitOfWork],
) -> Iterator[SqlAlchemyLocalStore]:
    _ = sqlite_unit_of_work
    store = SqlAlchemyLocalStore("posts")
    with store:
        yield store


def test_stores_are_isolated_by_collection(
    sqlite_local_store: SqlAlchemyLocalStore,
    posts_store: SqlAlchemyLocalStore,
) -> None:
    asyncio.run(sqlite_local_store.create({"_id": "1"}))

    assert asyncio.run(posts_store.search()) == []
    assert asyncio.run(posts_store.search(IdentifierEquals("1"))) == []
