"""Tipos de decisão e resultado de entrega."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class Channel(StrEnum):
    """Canais de entrega."""

    WEBHOOK = "webhook"
    WEBSOCKET = "websocket"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class DeliveryDecision:
    """Resultado de `decide` para um evento.

    Attributes:
        webhook_eligible: Webhook deve receber o evento
        websocket_eligible: Websocket deve receber o evento
        needs_media_fetch: Mídia precisa ser resolvida antes da entrega
        webhook_media: Envelope do webhook leva a mídia resolvida
        websocket_media: Envelope do websocket leva a mídia resolvida
        upload_media: Algum canal elegível pede upload ao object storage
        reason: Regra que decidiu quando nenhum canal é elegível
    """

    webhook_eligible: bool = False
    websocket_eligible: bool = False
    needs_media_fetch: bool = False
    webhook_media: bool = False
    websocket_media: bool = False
    upload_media: bool = False
    reason: str | None = None

    @property
    def channels(self) -> tuple[Channel, ...]:
        selected: list[Channel] = []
        if self.webhook_eligible:
            selected.append(Channel.WEBHOOK)
        if self.websocket_eligible:
            selected.append(Channel.WEBSOCKET)
        return tuple(selected)

    @property
    def is_empty(self) -> bool:
        return not (self.webhook_eligible or self.websocket_eligible)

    @classmethod
    def nothing(cls, reason: str) -> DeliveryDecision:
        return cls(reason=reason)


@dataclass(frozen=True, slots=True)
class DeliveryFailureRecord:
    """Registro auditável de entrega descartada após esgotar tentativas.

    Attributes:
        channel: Canal da entrega
        event_id: Evento afetado
        session: Sessão de origem
        attempts: Tentativas realizadas
        reason: Motivo final (status_500, connect_error, shutdown...)
        status_code: Último status HTTP (quando houver)
        failed_at: Momento do descarte
    """

    channel: Channel
    event_id: str
    session: str
    attempts: int
    reason: str
    status_code: int | None = None
    failed_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "channel": self.channel.value,
            "event_id": self.event_id,
            "session": self.session,
            "attempts": self.attempts,
            "reason": self.reason,
            "status_code": self.status_code,
            "failed_at": self.failed_at.isoformat(),
        }
