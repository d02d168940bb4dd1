"""Port for the remote record store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from recordsync.domain.model import HttpMethod

type RemotePayload = dict[str, Any] | list[dict[str, Any]] | None


@runtime_checkable
class RemoteStore(Protocol):
    """Single request/response primitive over the remote collection API."""

    async def request(
        self,
        method: HttpMethod,
        path: str,
        parameters: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RemotePayload: ...
