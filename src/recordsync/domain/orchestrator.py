"""CRUD operations that keep the local and the remote store in step."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from recordsync.domain.patch import patch_remote
from recordsync.domain.synchronizer import Synchronizer

if TYPE_CHECKING:
    from recordsync.domain.model import SynchronizableEntity
    from recordsync.domain.ports.persistence import LocalStore
    from recordsync.domain.predicates import Predicate
    from recordsync.domain.records import Record
    from recordsync.domain.remote import RemoteCollection

log = getLogger(__name__)


@dataclass(slots=True)
class SyncedRecordRepository[TEntity: SynchronizableEntity]:
    """Repository writing through the local store to the remote collection.

    Local state is written first so nothing lives only in memory when a
    remote call fails; such failures propagate and the next synchronization
    run settles the difference.
    """

    local: LocalStore[TEntity]
    remote: RemoteCollection
    synchronizer: Synchronizer[TEntity] = field(init=False)

    def __post_init__(self) -> None:
        self.synchronizer = Synchronizer(local=self.local, remote=self.remote)

    async def create(self, record: Record) -> TEntity:
        """Create locally, then remotely, then adopt the remote-assigned fields.

        If the remote call fails the local entity stays dirty and is pushed by
        the next synchronization run.
        """

        entity = await self.local.create(record)
        response = await self.remote.create(entity.dictionary)
        entity.update(response)
        return await self.local.update(entity)

    async def search(self, predicate: Predicate | None = None) -> list[TEntity]:
        return await self.local.search(predicate)

    async def update(self, entity: TEntity) -> TEntity:
        """Persist, send the full dictionary, then persist the remote answer."""

        await self.local.update(entity)
        response = await self.remote.update(entity.dictionary)
        entity.update(response)
        return await self.local.update(entity)

    async def patch(self, entity: TEntity) -> TEntity:
        """Like :meth:`update` but only transmits the fields changed since the last sync."""

        await self.local.update(entity)
        await patch_remote(entity, self.remote)
        return await self.local.update(entity)

    async def delete(self, entity: TEntity) -> None:
        """Delete remotely, then locally.

        The local copy survives a failed remote delete. An entity that never
        reached the remote store is only deleted locally.
        """

        if entity.has_identity:
            await self.remote.delete(entity.dictionary)
        else:
            log.debug("Deleting never synchronized entity locally only")
        await self.local.delete(entity)
