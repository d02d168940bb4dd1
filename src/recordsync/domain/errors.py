"""Errors raised by the record synchronization core and its adapters."""

from __future__ import annotations


class RecordSyncError(RuntimeError):
    """Base class for every error surfaced by a repository operation."""


class InitializationError(RecordSyncError):
    """Raised when a record cannot be turned into a local entity."""

    def __init__(self, message: str, *, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing = missing


class UnidentifiableError(RecordSyncError):
    """Raised when a record lacks the identifier a remote call needs."""

    def __init__(self, identifier_key: str) -> None:
        super().__init__(f"Record has no value for identifier key {identifier_key!r}")
        self.identifier_key = identifier_key


class BadEntityError(RecordSyncError):
    """Raised when an entity does not offer the capabilities an operation needs."""


class BadRequestError(RecordSyncError):
    """Raised when a remote request cannot be built (e.g. malformed URL)."""


class BadResponseError(RecordSyncError):
    """Raised when the transport fails or returns no usable response."""


class ServerError(RecordSyncError):
    """Raised when the remote store answers with a non-success status code."""

    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(message or f"Remote store answered with status {status_code}")
        self.status_code = status_code


class ParsingError(RecordSyncError):
    """Raised when a payload cannot be encoded or decoded as JSON."""


class CastingError(RecordSyncError):
    """Raised when a decoded payload does not have the expected shape."""


class StorageError(RecordSyncError):
    """Wraps failures coming from the local persistence layer."""

    def __init__(self, message: str, *, original: BaseException | None = None) -> None:
        super().__init__(message)
        self.original = original
