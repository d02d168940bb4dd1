"""Public interface for the HTTP remote store adapter."""

from __future__ import annotations

from .client import HttpRemoteStore, decode_body
from .schema import ErrorPayload, RemoteBody

__all__ = [
    "ErrorPayload",
    "HttpRemoteStore",
    "RemoteBody",
    "decode_body",
]
