"""SQLAlchemy adapter package for recordsync."""

from __future__ import annotations

from .local_store import SqlAlchemyLocalStore
from .mappings import create_all_tables, mapper_registry, record_table, start_mappers
from .repositories import SqlAlchemyRecordRepository
from .unit_of_work import (
    SqlAlchemyRecordUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyLocalStore",
    "SqlAlchemyRecordRepository",
    "SqlAlchemyRecordUnitOfWork",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "record_table",
    "shutdown",
    "start_mappers",
    "startup",
]
