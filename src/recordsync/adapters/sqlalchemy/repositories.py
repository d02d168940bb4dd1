"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from itertools import batched
from typing import TYPE_CHECKING

from sqlalchemy import select

from recordsync.adapters.sqlalchemy.mappings import record_table
from recordsync.domain.model import UNASSIGNED_ID, RecordEntity
from recordsync.domain.predicates import IdentifierEquals, IdentifierIn, StateIs, SynchronizedIs

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.orm import Session

    from recordsync.domain.predicates import Predicate

# keeps IN clauses below SQLite's bound-parameter limit
IDENTIFIER_CHUNK_SIZE = 500


class SqlAlchemyRecordRepository:
    """Records of one collection inside a session."""

    def __init__(self, session: Session, collection: str) -> None:
        self.session = session
        self.collection = collection

    def add(self, entity: RecordEntity) -> None:
        self.session.add(entity)

    def remove(self, entity: RecordEntity) -> None:
        self.session.delete(entity)

    def find(self, predicate: Predicate | None = None) -> list[RecordEntity]:
        if isinstance(predicate, IdentifierIn):
            found: list[RecordEntity] = []
            for chunk in batched(sorted(predicate.identifiers), IDENTIFIER_CHUNK_SIZE):
                found.extend(self._select(record_table.c.record_id.in_(chunk)))
            return found
        return self._select(*_criteria(predicate))

    def _select(self, *criteria: ColumnElement[bool]) -> list[RecordEntity]:
        stmt = (
            select(RecordEntity)
            .where(record_table.c.collection == self.collection)
            .where(*criteria)
            .order_by(record_table.c.created_at, record_table.c.local_id)
        )
        return list(self.session.execute(stmt).scalars().all())


def _criteria(predicate: Predicate | None) -> tuple[ColumnElement[bool], ...]:
    match predicate:
        case None:
            return ()
        case IdentifierEquals(identifier=identifier):
            return (
                record_table.c.record_id == identifier,
                record_table.c.record_id != UNASSIGNED_ID,
            )
        case IdentifierIn(identifiers=identifiers):
            return (record_table.c.record_id.in_(sorted(identifiers)),)
        case StateIs(state=state):
            return (record_table.c.state == state,)
        case SynchronizedIs():
            return (record_table.c.state.in_(sorted(predicate.states)),)
