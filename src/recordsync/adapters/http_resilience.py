"""httpx client with optional retries (httpx-retries) and throttling (aiolimiter)."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from aiolimiter import AsyncLimiter
from httpx_retries import Retry, RetryTransport

from recordsync.config.http_resilience import RateLimit, ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

__all__ = [
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
    "retry_for",
]

log = getLogger(__name__)


def retry_for(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.attempts,
        allowed_methods=sorted(policy.methods),
        status_forcelist=sorted(policy.status_codes),
        backoff_factor=policy.backoff_factor,
        backoff_jitter=policy.backoff_jitter,
        max_backoff_wait=policy.max_backoff_wait,
    )


class ResilientClient:
    """Async HTTP client configured from a :class:`ResilienceConfig`.

    ``transport`` replaces the network transport (tests pass an
    ``httpx.MockTransport``); retries wrap whichever transport is used.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit is not None
            else None
        )
        if config.retry is not None:
            transport = RetryTransport(transport=transport, retry=retry_for(config.retry))

        options: dict[str, Any] = {"timeout": config.timeout_seconds}
        if transport is not None:
            options["transport"] = transport
        if config.base_url is not None:
            options["base_url"] = config.base_url
        if config.default_headers:
            options["headers"] = dict(config.default_headers)
        self._client = httpx.AsyncClient(**options)
        log.debug("HTTP client %s ready (retry=%s)", config.name, config.retry is not None)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        content: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        if self._limiter is None:
            return await self._client.request(
                method, url, params=params, content=content, headers=headers
            )
        async with self._limiter:
            return await self._client.request(
                method, url, params=params, content=content, headers=headers
            )
