"""Predicate shapes the core asks the local store to evaluate.

The core only ever filters by identifier (single value or set) and by
synchronization state. Stores translate these into their own query language;
:func:`matches` is the reference in-memory evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from recordsync.domain.model.enums import SyncState

if TYPE_CHECKING:
    from collections.abc import Iterable

    from recordsync.domain.model import SynchronizableEntity


@dataclass(frozen=True, slots=True)
class IdentifierEquals:
    identifier: str


@dataclass(frozen=True, slots=True)
class IdentifierIn:
    identifiers: frozenset[str]

    @classmethod
    def of(cls, identifiers: Iterable[str]) -> IdentifierIn:
        return cls(frozenset(identifiers))


@dataclass(frozen=True, slots=True)
class StateIs:
    state: SyncState


@dataclass(frozen=True, slots=True)
class SynchronizedIs:
    """Boolean view on the state: ``False`` matches dirty and unseen entities."""

    synchronized: bool

    @property
    def states(self) -> frozenset[SyncState]:
        if self.synchronized:
            return frozenset({SyncState.SYNCED})
        return frozenset({SyncState.DIRTY, SyncState.UNSEEN})


type Predicate = IdentifierEquals | IdentifierIn | StateIs | SynchronizedIs


def matches(predicate: Predicate | None, entity: SynchronizableEntity) -> bool:
    match predicate:
        case None:
            return True
        case IdentifierEquals(identifier=identifier):
            return entity.has_identity and entity.id == identifier
        case IdentifierIn(identifiers=identifiers):
            return entity.has_identity and entity.id in identifiers
        case StateIs(state=state):
            return entity.state is state
        case SynchronizedIs():
            return entity.state in predicate.states
