"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import LocalStore, RecordRepository
from .remote import RemotePayload, RemoteStore
from .unit_of_work import (
    RecordRepositories,
    RecordUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "LocalStore",
    "RecordRepositories",
    "RecordRepository",
    "RecordUnitOfWork",
    "RemotePayload",
    "RemoteStore",
    "RepositoryCollection",
    "UnitOfWork",
]
