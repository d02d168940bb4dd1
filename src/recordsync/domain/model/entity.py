"""Local entity kept in sync with a remote record."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final
from uuid import UUID, uuid4

from recordsync.domain.errors import BadEntityError, InitializationError
from recordsync.domain.model.enums import SyncState
from recordsync.domain.records import DEFAULT_IDENTIFIER_KEY, merge

if TYPE_CHECKING:
    from recordsync.domain.records import Record

UNASSIGNED_ID: Final[str] = "-1"


def new_local_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class RecordEntity:
    """A locally persisted record.

    ``id`` is the identifier assigned by the remote store, or
    :data:`UNASSIGNED_ID` until the first successful round trip. ``payload``
    holds every other field. ``snapshot`` is the full record as of the last
    successful synchronization and serves as the baseline for patches.
    """

    collection: str
    id: str = UNASSIGNED_ID
    payload: dict[str, Any] = field(default_factory=dict[str, Any])
    state: SyncState = SyncState.DIRTY
    snapshot: dict[str, Any] | None = None
    identifier_key: str = DEFAULT_IDENTIFIER_KEY
    local_id: UUID = field(default_factory=new_local_id)

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        *,
        collection: str,
        identifier_key: str = DEFAULT_IDENTIFIER_KEY,
        required_fields: Collection[str] = (),
    ) -> RecordEntity:
        missing = tuple(name for name in required_fields if record.get(name) is None)
        if missing:
            raise InitializationError(
                f"Record for {collection!r} is missing required fields: {', '.join(missing)}",
                missing=missing,
            )

        payload = dict(record)
        identifier = payload.pop(identifier_key, None)
        if identifier is None:
            return cls(collection=collection, payload=payload, identifier_key=identifier_key)

        entity = cls(
            collection=collection,
            id=str(identifier),
            payload=payload,
            state=SyncState.SYNCED,
            identifier_key=identifier_key,
        )
        entity.snapshot = entity.dictionary
        return entity

    @property
    def has_identity(self) -> bool:
        return self.id != UNASSIGNED_ID

    @property
    def dictionary(self) -> Record:
        record = dict(self.payload)
        if self.has_identity:
            record[self.identifier_key] = self.id
        return record

    @property
    def synchronized(self) -> bool:
        return self.state is SyncState.SYNCED

    def set_synchronized(self, flag: bool) -> None:  # noqa: FBT001
        self.state = SyncState.SYNCED if flag else SyncState.UNSEEN

    def update(self, record: Record) -> None:
        """Merge remote values in place and remember the result as synchronized."""

        incoming = dict(record)
        identifier = incoming.pop(self.identifier_key, None)
        if identifier is not None:
            self.id = str(identifier)
        self.payload = merge(self.payload, incoming)
        self.state = SyncState.SYNCED
        self.snapshot = self.dictionary

    # local mutations ---------------------------------------------------------

    def get(self, name: str, default: Any = None) -> Any:  # noqa: ANN401
        if name == self.identifier_key:
            return self.id if self.has_identity else default
        return self.payload.get(name, default)

    def set(self, name: str, value: Any) -> None:  # noqa: ANN401
        self._reject_identifier(name)
        self.payload = merge(self.payload, {name: value})

    def unset(self, name: str) -> None:
        self._reject_identifier(name)
        self.payload = {key: value for key, value in self.payload.items() if key != name}

    def mark_dirty(self) -> None:
        self.state = SyncState.DIRTY

    def _reject_identifier(self, name: str) -> None:
        if name == self.identifier_key:
            raise BadEntityError(f"{name!r} is assigned by the remote store and cannot be edited")

    def __repr__(self) -> str:
        return f"RecordEntity(collection={self.collection!r}, id={self.id!r}, state={self.state})"
