from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from recordsync.adapters.sqlalchemy import start_mappers
from recordsync.adapters.sqlalchemy.local_store import SqlAlchemyLocalStore
from recordsync.adapters.sqlalchemy.mappings import create_all_tables
from recordsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyRecordUnitOfWork,
    shutdown,
    startup,
)
from tests.helpers.local import InMemoryLocalStore
from tests.helpers.remote import FakeRemoteStore

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from sqlalchemy.engine import Engine


@pytest.fixture
def sqlite_engine(tmp_path: Path) -> Iterator[Engine]:
    # file backed so the background worker thread sees the same database
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'records.db'}")
    start_mappers()
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyRecordUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyRecordUnitOfWork:
        return SqlAlchemyRecordUnitOfWork("users")

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def sqlite_local_store(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRecordUnitOfWork],
) -> Iterator[SqlAlchemyLocalStore]:
    store = SqlAlchemyLocalStore("users", unit_of_work_factory=sqlite_unit_of_work)
    with store:
        yield store


@pytest.fixture
def local_store() -> InMemoryLocalStore:
    return InMemoryLocalStore()


@pytest.fixture
def remote_store() -> FakeRemoteStore:
    return FakeRemoteStore()
