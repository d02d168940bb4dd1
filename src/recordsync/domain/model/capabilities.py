"""Capability contracts the synchronization core relies on.

Repositories and the synchronizer are generic over :class:`SynchronizableEntity`
so every capability is checked statically instead of probed at runtime.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from recordsync.domain.model.enums import SyncState
    from recordsync.domain.records import Record


class Identifiable(Protocol):
    @property
    def id(self) -> str: ...

    @property
    def has_identity(self) -> bool:
        """Whether a remote round trip already assigned a real identifier."""
        ...


class RecordRepresentable(Protocol):
    @property
    def dictionary(self) -> Record: ...


class RecordUpdatable(Protocol):
    def update(self, record: Record) -> None:
        """Merge remote values into the entity in place."""
        ...


class Patchable(Protocol):
    snapshot: Record | None


class Synchronizable(Protocol):
    state: SyncState

    @property
    def synchronized(self) -> bool: ...

    def set_synchronized(self, flag: bool) -> None: ...  # noqa: FBT001


class SynchronizableEntity(
    Identifiable,
    RecordRepresentable,
    RecordUpdatable,
    Patchable,
    Synchronizable,
    Protocol,
):
    """Everything a repository needs to keep an entity in both stores."""
