"""Synchronization defaults for the local store and the engine."""

from __future__ import annotations

from dataclasses import dataclass

from .env import csv_env_var, optional_env_var, positive_int_env_var

DEFAULT_BATCH_COMMIT_SIZE = 100
DEFAULT_COLLECTION = "records"
DEFAULT_IDENTIFIER_KEY = "_id"


@dataclass(frozen=True, slots=True)
class SyncConfig:
    collection: str = DEFAULT_COLLECTION
    identifier_key: str = DEFAULT_IDENTIFIER_KEY
    required_fields: tuple[str, ...] = ()
    batch_commit_size: int = DEFAULT_BATCH_COMMIT_SIZE


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        collection=optional_env_var("RECORDSYNC_COLLECTION", DEFAULT_COLLECTION).strip("/"),
        identifier_key=optional_env_var("RECORDSYNC_IDENTIFIER_KEY", DEFAULT_IDENTIFIER_KEY),
        required_fields=csv_env_var("RECORDSYNC_REQUIRED_FIELDS"),
        batch_commit_size=positive_int_env_var(
            "RECORDSYNC_BATCH_COMMIT_SIZE",
            DEFAULT_BATCH_COMMIT_SIZE,
        ),
    )
