"""Record-level CRUD over one remote collection path."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from recordsync.domain.errors import CastingError, UnidentifiableError
from recordsync.domain.model import HttpMethod
from recordsync.domain.records import DEFAULT_IDENTIFIER_KEY, is_record, merge

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from recordsync.domain.ports.remote import RemotePayload, RemoteStore
    from recordsync.domain.records import Record

log = getLogger(__name__)

BULK_UPSERT_SUFFIX = "collection"


@dataclass(slots=True)
class RemoteCollection:
    """Talks to ``store`` about the records living under ``path``."""

    store: RemoteStore
    path: str
    identifier_key: str = DEFAULT_IDENTIFIER_KEY

    async def create(self, record: Record) -> Record:
        response = await self.store.request(HttpMethod.POST, self.path, parameters=record)
        return merge(record, _as_record(response, allow_empty=True))

    async def search(self) -> list[Record]:
        response = await self.store.request(HttpMethod.GET, self.path)
        return _as_records(response)

    async def get(self, identifier: str) -> Record:
        response = await self.store.request(HttpMethod.GET, self.item_path(identifier))
        return _as_record(response)

    async def update(self, record: Record) -> Record:
        identifier = self.identifier_of(record)
        response = await self.store.request(
            HttpMethod.PUT,
            self.item_path(identifier),
            parameters=record,
        )
        return merge(record, _as_record(response, allow_empty=True))

    async def patch(self, identifier: str, changes: Record) -> Record:
        response = await self.store.request(
            HttpMethod.PATCH,
            self.item_path(identifier),
            parameters=changes,
        )
        return _as_record(response, allow_empty=True)

    async def delete(self, record: Record) -> None:
        identifier = self.identifier_of(record)
        await self.store.request(HttpMethod.DELETE, self.item_path(identifier))

    async def bulk_upsert(self, records: Sequence[Record]) -> list[Record]:
        """Create or update ``records`` in one call; answers one partial record each."""

        log.debug("Bulk upserting %s records to %s", len(records), self.path)
        response = await self.store.request(
            HttpMethod.POST,
            f"{self.path}/{BULK_UPSERT_SUFFIX}",
            parameters={"data": list(records)},
        )
        return _as_records(response)

    def identifier_of(self, record: Mapping[str, Any]) -> str:
        identifier = record.get(self.identifier_key)
        if identifier is None:
            raise UnidentifiableError(self.identifier_key)
        return str(identifier)

    def item_path(self, identifier: str) -> str:
        return f"{self.path}/{identifier}"


def _as_record(response: RemotePayload, *, allow_empty: bool = False) -> Record:
    if response is None and allow_empty:
        return {}
    if not is_record(response):
        raise CastingError(f"Expected a record, got {type(response).__name__}")
    return dict(response)


def _as_records(response: RemotePayload) -> list[Record]:
    if not isinstance(response, list):
        raise CastingError(f"Expected a list of records, got {type(response).__name__}")
    records: list[Record] = []
    for item in response:
        if not is_record(item):
            raise CastingError(f"Expected a record inside the list, got {type(item).__name__}")
        records.append(dict(item))
    return records
