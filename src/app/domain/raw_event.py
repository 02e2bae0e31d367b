"""Contrato do dict emitido pelo produtor de eventos (camada de navegador).

O produtor não é confiável: todo payload passa por `RawRuntimeEvent`
antes de virar `RuntimeEvent`. Timestamps sem fuso são tratados como UTC.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from app.domain.events import EventKind, MediaReference, RuntimeEvent, as_utc


class RawMediaReference(BaseModel):
    """Mídia anexada, como enviada pelo produtor."""

    model_config = ConfigDict(extra="ignore")

    url: str | None = None
    media_id: str | None = Field(default=None, validation_alias=AliasChoices("media_id", "id"))
    mimetype: str | None = None
    filename: str | None = None

    @model_validator(mode="after")
    def _require_locator(self) -> RawMediaReference:
        if not self.url and not self.media_id:
            raise ValueError("media requer url ou media_id")
        return self

    def to_reference(self) -> MediaReference:
        return MediaReference(
            url=self.url,
            media_id=self.media_id,
            mimetype=self.mimetype,
            filename=self.filename,
        )


class RawRuntimeEvent(BaseModel):
    """Evento bruto do produtor.

    Campos ausentes ou nulos em `labels`, `data` e `media` equivalem a vazio.
    `timestamp` aceita ISO 8601 ou epoch em segundos.
    """

    model_config = ConfigDict(extra="ignore")

    kind: EventKind
    session: str = Field(min_length=1)
    sender: str
    timestamp: datetime | None = None
    chat_id: str | None = None
    media: RawMediaReference | None = None
    labels: list[str] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)
    event_id: str | None = None

    @field_validator("media", mode="before")
    @classmethod
    def _empty_media(cls, value: Any) -> Any:
        return value or None

    @field_validator("labels", mode="before")
    @classmethod
    def _empty_labels(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("data", mode="before")
    @classmethod
    def _empty_data(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("timestamp", mode="after")
    @classmethod
    def _timestamp_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None

    def to_event(self) -> RuntimeEvent:
        extra: dict[str, Any] = {}
        if self.timestamp is not None:
            extra["timestamp"] = self.timestamp
        return RuntimeEvent(
            kind=self.kind,
            session=self.session,
            sender=self.sender,
            chat_id=self.chat_id,
            media=self.media.to_reference() if self.media is not None else None,
            labels=tuple(self.labels),
            data=dict(self.data),
            event_id=self.event_id or uuid.uuid4().hex,
            **extra,
        )


def parse_runtime_event(payload: Any) -> RuntimeEvent:
    """Valida o payload do produtor e constrói o evento.

    Raises:
        pydantic.ValidationError: payload fora do contrato
    """
    return RawRuntimeEvent.model_validate(payload).to_event()
