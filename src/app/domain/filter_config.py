"""Subconjunto da configuração relevante para filtragem de eventos.

Webhook e websocket têm conjuntos de flags independentes. Tipos ausentes
do mapa de um canal usam o `default_enabled` daquele canal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from app.domain.events import EventKind

if TYPE_CHECKING:
    from collections.abc import Mapping

    from config.settings import WebhookSettings, WebsocketSettings


@dataclass(frozen=True, slots=True)
class ChannelFilter:
    """Flags de um canal de entrega.

    Attributes:
        enabled: Canal ativo (webhook: URL configurada)
        kind_flags: Flag por tipo de evento
        default_enabled: Valor para tipos ausentes de kind_flags
        auto_download: Baixa mídia antes da entrega
        upload_s3: Publica a mídia no object storage
    """

    enabled: bool = True
    kind_flags: Mapping[EventKind, bool] = field(default_factory=lambda: MappingProxyType({}))
    default_enabled: bool = True
    auto_download: bool = False
    upload_s3: bool = False

    def allows(self, kind: EventKind) -> bool:
        if not self.enabled:
            return False
        return self.kind_flags.get(kind, self.default_enabled)


@dataclass(frozen=True, slots=True)
class FilterConfig:
    """Configuração imutável consumida por `decide`.

    Attributes:
        ignore: Remetentes excluídos de qualquer entrega
        self_echo_suppression: Suprime eventos de autoria da própria sessão
        webhook: Flags do canal webhook
        websocket: Flags do canal websocket
    """

    ignore: frozenset[str] = frozenset()
    self_echo_suppression: bool = False
    webhook: ChannelFilter = field(default_factory=ChannelFilter)
    websocket: ChannelFilter = field(default_factory=ChannelFilter)

    @classmethod
    def from_settings(
        cls,
        webhook: WebhookSettings,
        websocket: WebsocketSettings,
    ) -> FilterConfig:
        """Deriva a configuração de filtro das settings dos canais."""
        webhook_flags = MappingProxyType({
            EventKind.ACK: webhook.listen_acks,
            EventKind.PRESENCE_CHANGE: webhook.on_presence_changed,
            EventKind.PARTICIPANTS_CHANGE: webhook.on_participants_changed,
            EventKind.REACTION: webhook.on_reaction_message,
            EventKind.POLL_RESPONSE: webhook.on_poll_response,
            EventKind.REVOCATION: webhook.on_revoked_message,
            EventKind.LABEL_UPDATE: webhook.on_label_updated,
        })
        return cls(
            ignore=frozenset(webhook.ignore),
            self_echo_suppression=webhook.on_self_message,
            webhook=ChannelFilter(
                enabled=webhook.enabled,
                kind_flags=webhook_flags,
                default_enabled=True,
                auto_download=webhook.auto_download,
                upload_s3=webhook.upload_s3,
            ),
            websocket=ChannelFilter(
                enabled=True,
                default_enabled=True,
                auto_download=websocket.auto_download,
                upload_s3=websocket.upload_s3,
            ),
        )
