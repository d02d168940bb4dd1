"""HTTP implementation of the remote store port."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from recordsync.adapters.http_resilience import ResilienceConfig, ResilientClient
from recordsync.domain.errors import (
    BadRequestError,
    BadResponseError,
    CastingError,
    ParsingError,
    ServerError,
)
from recordsync.domain.model import HttpMethod
from recordsync.domain.ports.remote import RemotePayload, RemoteStore

from .schema import REMOTE_BODY_ADAPTER, ErrorPayload

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

log = getLogger(__name__)

_QUERY_METHODS = frozenset({HttpMethod.GET, HttpMethod.DELETE})


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class HttpRemoteStore:
    """Sends record requests as JSON over HTTP.

    Parameters travel as query string for GET/DELETE and as JSON body otherwise.
    Transport and protocol failures are translated into the domain errors.
    """

    resilience: ResilienceConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False)

    async def __aenter__(self) -> HttpRemoteStore:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: HttpMethod,
        path: str,
        parameters: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RemotePayload:
        client = self._ensure_client()
        url = path.lstrip("/")
        request_headers = dict(headers) if headers else None

        log.debug("%s %s", method, url)
        try:
            if parameters is not None and method in _QUERY_METHODS:
                response = await client.request(
                    method,
                    url,
                    params=_query_params(parameters),
                    headers=request_headers,
                )
            elif parameters is not None:
                response = await client.request(
                    method,
                    url,
                    content=_encode_body(parameters),
                    headers=request_headers,
                )
            else:
                response = await client.request(method, url, headers=request_headers)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise BadRequestError(f"Cannot build request for {url!r}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise BadResponseError(f"{method} {url} failed: {exc}") from exc

        if not response.is_success:
            raise ServerError(response.status_code, _error_message(response))

        return decode_body(response.content)

    def _ensure_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self.client_factory(self.resilience)
        return self._client


def _encode_body(parameters: Mapping[str, Any]) -> bytes:
    try:
        return json.dumps(parameters).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise ParsingError(f"Parameters are not JSON serializable: {exc}") from exc


def _query_params(parameters: Mapping[str, Any]) -> dict[str, str]:
    params: dict[str, str] = {}
    for key, value in parameters.items():
        if value is None:
            continue
        params[key] = value if isinstance(value, str) else json.dumps(value)
    return params


def decode_body(content: bytes) -> RemotePayload:
    """Decode a response body into a record, a list of records or ``None``."""

    if not content.strip():
        return None
    try:
        payload = json.loads(content)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ParsingError(f"Response body is not valid JSON: {exc}") from exc
    try:
        return REMOTE_BODY_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise CastingError(f"Unexpected response shape: {type(payload).__name__}") from exc


def _error_message(response: httpx.Response) -> str:
    fallback = f"Remote store answered with status {response.status_code}"
    try:
        payload = response.json()
    except ValueError:
        return fallback
    if not isinstance(payload, dict):
        return fallback
    try:
        text = ErrorPayload.model_validate(payload).text
    except ValidationError:
        return fallback
    return f"{fallback}: {text}" if text else fallback


if TYPE_CHECKING:
    _store_check: RemoteStore = HttpRemoteStore(ResilienceConfig(name="check"))
