"""Partial updates that only transmit fields changed since the last sync."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from recordsync.domain.errors import UnidentifiableError
from recordsync.domain.records import difference, merge

if TYPE_CHECKING:
    from recordsync.domain.model import SynchronizableEntity
    from recordsync.domain.records import Record
    from recordsync.domain.remote import RemoteCollection

log = getLogger(__name__)


def compute_patch(entity: SynchronizableEntity) -> Record:
    """Diff the entity against its snapshot; an entity without snapshot diffs against ``{}``."""

    return difference(entity.snapshot or {}, entity.dictionary)


async def patch_remote[TEntity: SynchronizableEntity](
    entity: TEntity,
    remote: RemoteCollection,
) -> TEntity:
    """Send only the changed fields of ``entity`` to the remote collection.

    An empty diff returns the entity untouched without contacting the remote
    store. Otherwise the response is merged into the full dictionary and the
    entity (and with it its snapshot) is updated.
    """

    changes = compute_patch(entity)
    if not changes:
        log.debug("Skipping patch for %s: nothing changed since last sync", entity.id)
        return entity

    if not entity.has_identity:
        raise UnidentifiableError(remote.identifier_key)

    log.debug("Patching %s with fields %s", entity.id, sorted(changes))
    response = await remote.patch(entity.id, changes)
    entity.update(merge(entity.dictionary, response))
    return entity
