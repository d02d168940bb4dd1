"""Public domain model surface."""

from __future__ import annotations

from recordsync.domain.model.capabilities import (
    Identifiable,
    Patchable,
    RecordRepresentable,
    RecordUpdatable,
    Synchronizable,
    SynchronizableEntity,
)
from recordsync.domain.model.entity import UNASSIGNED_ID, RecordEntity
from recordsync.domain.model.enums import HttpMethod, SyncState

__all__ = [
    "UNASSIGNED_ID",
    "HttpMethod",
    "Identifiable",
    "Patchable",
    "RecordEntity",
    "RecordRepresentable",
    "RecordUpdatable",
    "SyncState",
    "Synchronizable",
    "SynchronizableEntity",
]
