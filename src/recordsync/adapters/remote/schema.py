"""Pydantic models describing remote store payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter

RecordPayload = dict[str, Any]
RemoteBody = RecordPayload | list[RecordPayload]

REMOTE_BODY_ADAPTER: TypeAdapter[RemoteBody] = TypeAdapter(RemoteBody)


class RemoteBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ErrorPayload(RemoteBaseModel):
    """Best-effort view on an error body; servers disagree on the field name."""

    message: str | None = None
    error: str | None = None
    detail: str | None = None

    @property
    def text(self) -> str | None:
        return self.message or self.error or self.detail
