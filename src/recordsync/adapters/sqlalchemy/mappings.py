"""SQLAlchemy mapping metadata for locally persisted records."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    String,
    Table,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.ext.mutable import MutableDict
from sqlalchemy.orm import configure_mappers

from recordsync.domain.model import UNASSIGNED_ID, RecordEntity, SyncState

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


def utcnow() -> datetime:
    return datetime.now(UTC)


class UTCDateTime(TypeDecorator[datetime]):
    """Aware UTC datetimes stored naive, since SQLite drops the offset."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        return None if value is None else value.astimezone(UTC).replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        return None if value is None else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()

record_table = Table(
    "record",
    mapper_registry.metadata,
    Column("local_id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("collection", String, nullable=False),
    Column("record_id", String, nullable=False, default=UNASSIGNED_ID),
    Column("identifier_key", String, nullable=False),
    Column("payload", MutableDict.as_mutable(JSON(none_as_null=True)), nullable=False),
    Column(
        "state",
        Enum(
            SyncState,
            native_enum=False,
            length=16,
            values_callable=lambda states: [state.value for state in states],
        ),
        nullable=False,
    ),
    Column("snapshot", JSON(none_as_null=True), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, default=utcnow),
    Column("updated_at", UTCDateTime(), nullable=False, default=utcnow, onupdate=utcnow),
    Index("ix_record_collection_record_id", "collection", "record_id"),
    Index("ix_record_collection_state", "collection", "state"),
)


@cache
def start_mappers() -> orm.registry:
    """Map :class:`RecordEntity` onto ``record``; the remote identifier lives in ``record_id``."""

    log.debug("Mapping RecordEntity onto %s", record_table.name)
    mapper_registry.map_imperatively(
        RecordEntity,
        record_table,
        properties={"id": record_table.c.record_id},
    )

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    log.debug("Ensuring record tables exist on %s", engine.url)
    mapper_registry.metadata.create_all(engine)
