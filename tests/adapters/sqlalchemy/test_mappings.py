from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session

from recordsync.adapters.sqlalchemy import start_mappers
from recordsync.adapters.sqlalchemy.mappings import record_table
from recordsync.domain.model import RecordEntity, SyncState

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def test_start_mappers_is_idempotent() -> None:
    assert start_mappers() is start_mappers()


def test_record_table_has_expected_indexes(sqlite_engine: Engine) -> None:
    indexes = {index["name"] for index in inspect(sqlite_engine).get_indexes("record")}

    assert {"ix_record_collection_record_id", "ix_record_collection_state"} <= indexes


def test_entity_round_trips_through_table(sqlite_engine: Engine) -> None:
    entity = RecordEntity.from_record(
        {"_id": "1", "name": "Ada", "address": {"city": "London"}, "tags": ["a"]},
        collection="users",
    )

    with Session(sqlite_engine, expire_on_commit=False) as session:
        session.add(entity)
        session.commit()

    with sqlite_engine.connect() as connection:
        row = connection.execute(select(record_table)).one()

    assert row.record_id == "1"
    assert row.collection == "users"
    assert row.state == SyncState.SYNCED
    assert row.payload == {"name": "Ada", "address": {"city": "London"}, "tags": ["a"]}
    assert row.snapshot == {"_id": "1", "name": "Ada", "address": {"city": "London"}, "tags": ["a"]}
    assert row.created_at.tzinfo is not None

    with Session(sqlite_engine) as session:
        loaded = session.execute(select(RecordEntity)).scalars().one()
        assert loaded.id == "1"
        assert loaded.state is SyncState.SYNCED
        assert loaded.dictionary == {
            "_id": "1",
            "name": "Ada",
            "address": {"city": "London"},
            "tags": ["a"],
        }
