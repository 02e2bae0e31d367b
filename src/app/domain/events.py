"""Eventos de runtime produzidos pela camada de automação do WhatsApp.

Cada RuntimeEvent é uma ocorrência candidata a notificação. O produtor
(camada de navegador) entrega dicts validados em `app.domain.raw_event`.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from types import MappingProxyType
from typing import Any


class EventKind(StrEnum):
    """Tipos de evento avaliados para entrega."""

    MESSAGE = "message"
    ACK = "ack"
    PRESENCE_CHANGE = "presence-change"
    PARTICIPANTS_CHANGE = "participants-change"
    REACTION = "reaction"
    POLL_RESPONSE = "poll-response"
    REVOCATION = "revocation"
    LABEL_UPDATE = "label-update"
    QR_CODE = "qr-code"
    STATUS_CHANGE = "status-change"

    def __str__(self) -> str:
        return self.value


# Nome do evento no corpo enviado ao consumidor (compatível com o servidor original)
WIRE_EVENT_NAMES: MappingProxyType[EventKind, str] = MappingProxyType({
    EventKind.MESSAGE: "onmessage",
    EventKind.ACK: "onack",
    EventKind.PRESENCE_CHANGE: "onpresencechanged",
    EventKind.PARTICIPANTS_CHANGE: "onparticipantschanged",
    EventKind.REACTION: "onreactionmessage",
    EventKind.POLL_RESPONSE: "onpollresponse",
    EventKind.REVOCATION: "onrevokedmessage",
    EventKind.LABEL_UPDATE: "onlabelupdated",
    EventKind.QR_CODE: "qrcode",
    EventKind.STATUS_CHANGE: "status-find",
})


def as_utc(value: datetime) -> datetime:
    """Converte para UTC; datetime sem fuso é assumido como UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class MediaReference:
    """Referência a mídia anexada ao evento.

    Attributes:
        url: URL direta da mídia (quando disponível)
        media_id: ID opaco resolvido pela camada de automação
        mimetype: Tipo MIME informado pelo produtor
        filename: Nome do arquivo (opcional)
    """

    url: str | None = None
    media_id: str | None = None
    mimetype: str | None = None
    filename: str | None = None

    def __post_init__(self) -> None:
        if not self.url and not self.media_id:
            raise ValueError("MediaReference requer url ou media_id")


@dataclass(frozen=True, slots=True)
class RuntimeEvent:
    """Ocorrência de runtime a ser avaliada para entrega.

    Attributes:
        kind: Tipo do evento
        session: Nome da sessão de origem
        sender: Identificador (JID) do remetente
        timestamp: Momento da ocorrência (UTC)
        chat_id: Conversa onde ocorreu (default: o próprio remetente)
        media: Mídia anexada (opcional)
        labels: Etiquetas anexadas (opcional)
        data: Sub-campos específicos do tipo (ack, presença, enquete, reação...)
        event_id: Identificador único, usado como correlation_id nos logs
    """

    kind: EventKind
    session: str
    sender: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    chat_id: str | None = None
    media: MediaReference | None = None
    labels: tuple[str, ...] = ()
    data: dict[str, Any] = field(default_factory=dict)
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", as_utc(self.timestamp))

    @property
    def conversation_key(self) -> str:
        """Chave da conversa usada pelo scheduler de arquivamento."""
        return f"{self.session}:{self.chat_id or self.sender}"

    @property
    def wire_name(self) -> str:
        return WIRE_EVENT_NAMES[self.kind]
