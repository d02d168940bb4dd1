"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SyncState(StrEnum):
    """Synchronization state of a local entity.

    ``UNSEEN`` is only ever set by a reconciliation run: it stages the entity
    for the tombstone sweep until the remote pull confirms it still exists.
    """

    SYNCED = "synced"
    DIRTY = "dirty"
    UNSEEN = "unseen"


class HttpMethod(StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
