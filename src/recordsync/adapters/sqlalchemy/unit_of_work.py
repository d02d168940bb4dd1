"""Engine lifecycle and units of work for the SQLAlchemy adapter."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from recordsync.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from recordsync.adapters.sqlalchemy.repositories import SqlAlchemyRecordRepository
from recordsync.config.storage import get_database_config
from recordsync.domain.ports.unit_of_work import RecordRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the adapter is used before :func:`startup` or configured twice."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    session_factory: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self.session_factory = (
            sessionmaker(bind=engine, expire_on_commit=False) if engine is not None else None
        )

    def require_session_factory(self) -> sessionmaker[Session]:
        if self.session_factory is None:
            raise StartupError(
                "SQLAlchemy adapter not started. Call "
                "recordsync.adapters.sqlalchemy.startup() before opening a unit of work."
            )
        return self.session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to ``engine`` (or one built from the URI) and create the schema.

    Without arguments the URI comes from :func:`recordsync.config.get_database_config`.
    """

    if _STATE.engine is not None and not force:
        raise StartupError("SQLAlchemy adapter already started. Pass force=True to rebind.")

    bound = engine or create_engine(database_uri or get_database_config().uri)
    start_mappers()
    create_all_tables(bound)
    _STATE.bind(bound)
    log.debug("SQLAlchemy adapter bound to %s", bound.url)


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the engine and forget it; mostly used between tests."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.bind(None)


class SqlAlchemyRecordUnitOfWork:
    """One session over the records of ``collection``.

    Leaving the ``with`` block closes the session; an exception rolls back
    whatever was not committed.
    """

    def __init__(self, collection: str) -> None:
        self.collection = collection
        self._session_factory = _STATE.require_session_factory()
        self._session: Session | None = None
        self._repositories: RecordRepositories | None = None

    def __enter__(self) -> SqlAlchemyRecordUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work already entered")
        self._session = self._session_factory()
        self._repositories = RecordRepositories(
            records=SqlAlchemyRecordRepository(self._session, self.collection)
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not active; enter it with a `with` block")
        return self._session

    @property
    def repositories(self) -> RecordRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not active; enter it with a `with` block")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from recordsync.domain.ports.unit_of_work import RecordUnitOfWork

    _uow_check: RecordUnitOfWork = SqlAlchemyRecordUnitOfWork("records")
