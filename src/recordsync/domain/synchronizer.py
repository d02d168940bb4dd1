"""Bidirectional reconciliation between the local and the remote store.

A full run executes these phases strictly in order; the first failure aborts
the run and propagates:

1. push: upload every dirty local entity in one bulk upsert
2. stage: mark every local entity as unseen
3. pull: fetch the remote snapshot (restoring staged entities on failure)
4. match: update local entities whose identifier was pulled
5. create: materialize pulled records without local counterpart
6. sweep: delete entities the pull did not confirm

Conflicts are settled asymmetrically: local wins on push, remote wins on pull.
Runs against the same local store must be serialized by the caller.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from recordsync.domain.index import RecordIndex
from recordsync.domain.model import SynchronizableEntity, SyncState
from recordsync.domain.predicates import IdentifierIn, StateIs

if TYPE_CHECKING:
    from recordsync.domain.ports.persistence import LocalStore
    from recordsync.domain.records import Record
    from recordsync.domain.remote import RemoteCollection

type RemoteSearch = Callable[[], Awaitable[Sequence[Record]]]

log = getLogger(__name__)


@dataclass(slots=True)
class PushResult:
    """Outcome of uploading dirty entities."""

    pushed: int = 0
    confirmed: int = 0


@dataclass(slots=True)
class ReconcileResult:
    """Outcome of folding pulled records into the local store."""

    updated: int = 0
    created: int = 0


@dataclass(slots=True)
class SyncResult:
    """Outcome of a synchronization run."""

    pushed: int = 0
    pulled: int = 0
    updated: int = 0
    created: int = 0
    deleted: int = 0


@dataclass(slots=True)
class _Staged[TEntity]:
    entities: list[TEntity]
    dirty: frozenset[str]


@dataclass(slots=True)
class Synchronizer[TEntity: SynchronizableEntity]:
    """Keep ``local`` eventually consistent with ``remote``."""

    local: LocalStore[TEntity]
    remote: RemoteCollection

    @property
    def identifier_key(self) -> str:
        return self.remote.identifier_key

    async def synchronize(self, search: RemoteSearch | None = None) -> SyncResult:
        """Run push, pull, reconcile and sweep.

        ``search`` replaces the default full remote search, e.g. with a filtered
        one. Local entities missing from its result are deleted.
        """

        log.info("Starting synchronization of %s", self.remote.path)
        push = await self.push()
        staged = await self._stage()
        records = await self._pull(search, staged)
        reconciled = await self.reconcile(records)
        deleted = await self.sweep()

        result = SyncResult(
            pushed=push.pushed,
            pulled=len(records),
            updated=reconciled.updated,
            created=reconciled.created,
            deleted=deleted,
        )
        log.info(
            "Finished synchronization of %s: pushed=%s, pulled=%s, updated=%s, "
            "created=%s, deleted=%s",
            self.remote.path,
            result.pushed,
            result.pulled,
            result.updated,
            result.created,
            result.deleted,
        )
        return result

    async def push(self) -> PushResult:
        """Upload dirty entities and merge the answers back positionally."""

        dirty = await self.local.search(StateIs(SyncState.DIRTY))
        if not dirty:
            log.debug("Nothing to push for %s", self.remote.path)
            return PushResult()

        responses = await self.remote.bulk_upsert([entity.dictionary for entity in dirty])
        if len(responses) != len(dirty):
            log.warning(
                "Bulk upsert to %s answered %s records for %s sent",
                self.remote.path,
                len(responses),
                len(dirty),
            )

        for entity, response in zip(dirty, responses, strict=False):
            entity.update(response)
        await self.local.update_many(dirty)

        confirmed = min(len(dirty), len(responses))
        log.info("Pushed %s entities to %s (%s confirmed)", len(dirty), self.remote.path, confirmed)
        return PushResult(pushed=len(dirty), confirmed=confirmed)

    async def pull(self, search: RemoteSearch | None = None) -> SyncResult:
        """Fetch and reconcile without deleting anything.

        Entities the pull did not confirm keep the state they had before.
        """

        staged = await self._stage()
        records = await self._pull(search, staged)
        reconciled = await self.reconcile(records)

        unconfirmed = await self.local.search(StateIs(SyncState.UNSEEN))
        await self._restore(unconfirmed, staged.dirty)

        return SyncResult(
            pulled=len(records),
            updated=reconciled.updated,
            created=reconciled.created,
        )

    async def reconcile(self, records: Sequence[Record]) -> ReconcileResult:
        """Update matching local entities and create the missing ones."""

        index = RecordIndex(records, self.identifier_key)
        if not index:
            return ReconcileResult()

        candidates = await self.local.search(IdentifierIn.of(index.identifiers))
        matched, _ = index.partition(candidates)
        for entity, record in matched:
            entity.update(record)
        if matched:
            await self.local.update_many([entity for entity, _ in matched])

        remaining = index.remaining()
        if remaining:
            await self.local.create_many(remaining)

        log.debug(
            "Reconciled %s records into %s: updated=%s, created=%s",
            len(records),
            self.remote.path,
            len(matched),
            len(remaining),
        )
        return ReconcileResult(updated=len(matched), created=len(remaining))

    async def sweep(self) -> int:
        """Delete every entity still staged as unseen."""

        stale = await self.local.search(StateIs(SyncState.UNSEEN))
        if stale:
            await self.local.delete_many(stale)
            log.info("Swept %s entities no longer present in %s", len(stale), self.remote.path)
        return len(stale)

    async def _stage(self) -> _Staged[TEntity]:
        entities = await self.local.search()
        dirty = frozenset(
            entity.id
            for entity in entities
            if entity.has_identity and entity.state is SyncState.DIRTY
        )
        for entity in entities:
            entity.set_synchronized(False)
        if entities:
            await self.local.update_many(entities)
        return _Staged(entities=entities, dirty=dirty)

    async def _pull(self, search: RemoteSearch | None, staged: _Staged[TEntity]) -> list[Record]:
        fetch = search or self.remote.search
        try:
            records = await fetch()
        except BaseException:
            log.warning(
                "Pull from %s failed, restoring %s staged entities",
                self.remote.path,
                len(staged.entities),
            )
            await self._restore(staged.entities, staged.dirty)
            raise
        return list(records)

    async def _restore(self, entities: list[TEntity], dirty: frozenset[str]) -> None:
        if not entities:
            return
        for entity in entities:
            entity.state = _restored_state(entity, dirty)
        await self.local.update_many(entities)


def _restored_state(entity: SynchronizableEntity, dirty: frozenset[str]) -> SyncState:
    """State of an entity taken out of tombstone staging without a sweep.

    Entities that were dirty before staging, or never reached the remote store,
    stay dirty; everything else was synchronized.
    """

    if not entity.has_identity or entity.id in dirty:
        return SyncState.DIRTY
    return SyncState.SYNCED
