"""Identifier index over a batch of remote records."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from recordsync.domain.model import SynchronizableEntity
    from recordsync.domain.records import Record

log = getLogger(__name__)


def build_identifier_index(records: Sequence[Record], identifier_key: str) -> dict[str, int]:
    """Map each identifier to its position in ``records``.

    Records without an identifier are skipped with a warning. When an
    identifier occurs more than once, the last occurrence wins.
    """

    index: dict[str, int] = {}
    for position, record in enumerate(records):
        identifier = record.get(identifier_key)
        if identifier is None:
            log.warning("Skipping record at position %s without %r", position, identifier_key)
            continue
        index[str(identifier)] = position
    return index


@dataclass(slots=True)
class RecordIndex:
    """Single-use index over pulled records.

    The remaining identifiers double as the "not yet consumed" set: matching a
    local entity consumes its identifier, and whatever is left afterwards has
    no local counterpart.
    """

    records: Sequence[Record]
    identifier_key: str
    _positions: dict[str, int] = field(init=False)

    def __post_init__(self) -> None:
        self._positions = build_identifier_index(self.records, self.identifier_key)

    def __len__(self) -> int:
        return len(self._positions)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._positions

    @property
    def identifiers(self) -> frozenset[str]:
        return frozenset(self._positions)

    def record_for(self, identifier: str) -> Record | None:
        position = self._positions.get(identifier)
        return None if position is None else self.records[position]

    def consume(self, identifier: str) -> Record | None:
        position = self._positions.pop(identifier, None)
        return None if position is None else self.records[position]

    def remaining(self) -> list[Record]:
        return [self.records[position] for position in sorted(self._positions.values())]

    def partition[TEntity: SynchronizableEntity](
        self,
        entities: Iterable[TEntity],
    ) -> tuple[list[tuple[TEntity, Record]], list[TEntity]]:
        """Split ``entities`` into (entity, record) matches and unmatched entities.

        Matching consumes the identifier.
        """

        matched: list[tuple[TEntity, Record]] = []
        unmatched: list[TEntity] = []
        for entity in entities:
            record = self.consume(entity.id) if entity.has_identity else None
            if record is None:
                unmatched.append(entity)
            else:
                matched.append((entity, record))
        return matched, unmatched
