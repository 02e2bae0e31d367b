"""Envelope JSON entregue a webhook e websocket.

Mesmo esquema lógico nos dois canais; serializado via pydantic.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from app.domain.events import RuntimeEvent


class MediaPayload(BaseModel):
    """Mídia resolvida (link público ou data URI)."""

    model_config = ConfigDict(frozen=True)

    link: str
    mimetype: str | None = None
    filename: str | None = None


class DeliveryEnvelope(BaseModel):
    """Corpo enviado ao consumidor."""

    model_config = ConfigDict(frozen=True)

    event: str = Field(..., description="Nome do evento no formato do servidor original")
    kind: str
    session: str
    sender: str
    chat_id: str | None = None
    timestamp: datetime
    event_id: str
    media: MediaPayload | None = None
    media_error: bool = False
    labels: list[str] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_event(
        cls,
        event: RuntimeEvent,
        *,
        labels: list[str],
        media: MediaPayload | None = None,
        media_error: bool = False,
    ) -> DeliveryEnvelope:
        return cls(
            event=event.wire_name,
            kind=event.kind.value,
            session=event.session,
            sender=event.sender,
            chat_id=event.chat_id or event.sender,
            timestamp=event.timestamp,
            event_id=event.event_id,
            media=media,
            media_error=media_error,
            labels=labels,
            data=event.data,
        )

    def to_json_dict(self) -> dict[str, Any]:
        """Dict JSON-serializável (datas em ISO 8601)."""
        return self.model_dump(mode="json")
