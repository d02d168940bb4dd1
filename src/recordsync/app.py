"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from recordsync.adapters.remote import HttpRemoteStore
from recordsync.adapters.sqlalchemy.local_store import SqlAlchemyLocalStore
from recordsync.adapters.sqlalchemy.unit_of_work import is_started, startup
from recordsync.config import get_remote_config, get_sync_config
from recordsync.domain.orchestrator import SyncedRecordRepository
from recordsync.domain.predicates import StateIs
from recordsync.domain.remote import RemoteCollection

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from recordsync.config import SyncConfig
    from recordsync.domain.model import RecordEntity, SyncState
    from recordsync.domain.ports.remote import RemoteStore
    from recordsync.domain.synchronizer import PushResult, SyncResult

type RepositoryOperation[T] = Callable[[SyncedRecordRepository[RecordEntity]], Awaitable[T]]

log = getLogger(__name__)


def build_local_store(sync_config: SyncConfig | None = None) -> SqlAlchemyLocalStore:
    config = sync_config or get_sync_config()
    return SqlAlchemyLocalStore(
        config.collection,
        identifier_key=config.identifier_key,
        required_fields=config.required_fields,
        batch_commit_size=config.batch_commit_size,
    )


def build_repository(
    *,
    remote_store: RemoteStore,
    local_store: SqlAlchemyLocalStore | None = None,
    sync_config: SyncConfig | None = None,
) -> SyncedRecordRepository[RecordEntity]:
    """Wire the local store and the remote collection of the configured collection."""

    config = sync_config or get_sync_config()
    remote = RemoteCollection(
        store=remote_store,
        path=config.collection,
        identifier_key=config.identifier_key,
    )
    return SyncedRecordRepository(local=local_store or build_local_store(config), remote=remote)


def synchronize_records(
    *,
    remote_store: RemoteStore | None = None,
    local_store: SqlAlchemyLocalStore | None = None,
    sync_config: SyncConfig | None = None,
) -> SyncResult:
    """Push dirty records, pull the remote collection and drop what it no longer has."""

    result = _run(
        lambda repository: repository.synchronizer.synchronize(),
        remote_store=remote_store,
        local_store=local_store,
        sync_config=sync_config,
    )
    log.info(
        f"Finished sync: pushed={result.pushed}, pulled={result.pulled}, "
        f"updated={result.updated}, created={result.created}, deleted={result.deleted}"
    )
    return result


def push_records(
    *,
    remote_store: RemoteStore | None = None,
    local_store: SqlAlchemyLocalStore | None = None,
    sync_config: SyncConfig | None = None,
) -> PushResult:
    """Upload dirty records without pulling."""

    result = _run(
        lambda repository: repository.synchronizer.push(),
        remote_store=remote_store,
        local_store=local_store,
        sync_config=sync_config,
    )
    log.info(f"Finished push: pushed={result.pushed}, confirmed={result.confirmed}")
    return result


def pull_records(
    *,
    remote_store: RemoteStore | None = None,
    local_store: SqlAlchemyLocalStore | None = None,
    sync_config: SyncConfig | None = None,
) -> SyncResult:
    """Fold the remote collection into the local store without deleting anything."""

    result = _run(
        lambda repository: repository.synchronizer.pull(),
        remote_store=remote_store,
        local_store=local_store,
        sync_config=sync_config,
    )
    log.info(
        f"Finished pull: pulled={result.pulled}, updated={result.updated}, "
        f"created={result.created}"
    )
    return result


def list_records(
    *,
    state: SyncState | None = None,
    local_store: SqlAlchemyLocalStore | None = None,
    sync_config: SyncConfig | None = None,
) -> list[RecordEntity]:
    """Return the locally stored records, optionally only those in ``state``."""

    _ensure_started()
    store = local_store or build_local_store(sync_config)
    predicate = StateIs(state) if state is not None else None

    with store:
        return asyncio.run(store.search(predicate))


def _ensure_started() -> None:
    if not is_started():
        startup()


def _run[T](
    operation: RepositoryOperation[T],
    *,
    remote_store: RemoteStore | None,
    local_store: SqlAlchemyLocalStore | None,
    sync_config: SyncConfig | None,
) -> T:
    _ensure_started()
    config = sync_config or get_sync_config()
    store = local_store or build_local_store(config)

    async def run() -> T:
        if remote_store is not None:
            repository = build_repository(
                remote_store=remote_store,
                local_store=store,
                sync_config=config,
            )
            return await operation(repository)

        async with HttpRemoteStore(get_remote_config().resilience) as http_store:
            repository = build_repository(
                remote_store=http_store,
                local_store=store,
                sync_config=config,
            )
            return await operation(repository)

    with store:
        return asyncio.run(run())
